"""
Package types and article categories.

Both lookup tables share one set of handlers; each router binds them to
its repository, permission scope and response shape.
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends

from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import SQLiteArticleCategoryRepo, SQLitePackageTypeRepo
from src.api.deps import (
    get_article_category_repo,
    get_clock,
    get_current_user,
    get_package_type_repo,
    get_policy,
    require_permission,
)
from src.api.errors import raise_for_errors
from src.api.schemas import (
    ArticleCategoryResponse,
    PackageTypeResponse,
    SuccessResponse,
    TaxonomyRequest,
)
from src.components.taxonomy import (
    ARTICLE_CATEGORIES,
    PACKAGE_TYPES,
    CreateTaxonInput,
    DeleteTaxonInput,
    ListTaxaInput,
    TaxonomyKind,
    UpdateTaxonInput,
    run_create,
    run_delete,
    run_list,
    run_update,
)
from src.domain.entities import User
from src.domain.policy import PolicyEngine

package_types_router = APIRouter()
article_categories_router = APIRouter()


def _list(kind: TaxonomyKind, repo: Any) -> list[tuple[Any, int]]:
    result = run_list(ListTaxaInput(kind=kind), repo=repo)
    return [(u.item, u.usage_count) for u in result.items]


def _create(kind: TaxonomyKind, req: TaxonomyRequest, repo: Any, clock: SystemClock) -> Any:
    result = run_create(CreateTaxonInput(kind=kind, fields=req.model_dump()), repo=repo, time=clock)
    if not result.success:
        raise_for_errors(result.errors)
    return result.item


def _update(
    kind: TaxonomyKind, item_id: UUID, req: TaxonomyRequest, repo: Any, clock: SystemClock
) -> Any:
    result = run_update(
        UpdateTaxonInput(kind=kind, item_id=item_id, fields=req.model_dump()),
        repo=repo,
        time=clock,
    )
    if not result.success:
        raise_for_errors(result.errors)
    return result.item


def _delete(kind: TaxonomyKind, item_id: UUID, repo: Any) -> SuccessResponse:
    result = run_delete(DeleteTaxonInput(kind=kind, item_id=item_id), repo=repo)
    if not result.success:
        raise_for_errors(result.errors)
    return SuccessResponse()


# --- Package types ---


def _package_type_response(item: Any, count: int) -> PackageTypeResponse:
    return PackageTypeResponse(
        id=item.id,
        name=item.name,
        description=item.description,
        package_count=count,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


@package_types_router.get("", response_model=list[PackageTypeResponse])
def list_package_types(
    current_user: User = Depends(get_current_user),
    repo: SQLitePackageTypeRepo = Depends(get_package_type_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> list[PackageTypeResponse]:
    require_permission(current_user, policy, "package_types:read")
    return [_package_type_response(item, n) for item, n in _list(PACKAGE_TYPES, repo)]


@package_types_router.post("", response_model=PackageTypeResponse, status_code=201)
def create_package_type(
    req: TaxonomyRequest,
    current_user: User = Depends(get_current_user),
    repo: SQLitePackageTypeRepo = Depends(get_package_type_repo),
    policy: PolicyEngine = Depends(get_policy),
    clock: SystemClock = Depends(get_clock),
) -> PackageTypeResponse:
    require_permission(current_user, policy, "package_types:create")
    return _package_type_response(_create(PACKAGE_TYPES, req, repo, clock), 0)


@package_types_router.put("/{item_id}", response_model=PackageTypeResponse)
def update_package_type(
    item_id: UUID,
    req: TaxonomyRequest,
    current_user: User = Depends(get_current_user),
    repo: SQLitePackageTypeRepo = Depends(get_package_type_repo),
    policy: PolicyEngine = Depends(get_policy),
    clock: SystemClock = Depends(get_clock),
) -> PackageTypeResponse:
    require_permission(current_user, policy, "package_types:edit")
    item = _update(PACKAGE_TYPES, item_id, req, repo, clock)
    return _package_type_response(item, repo.count_usage(item.id))


@package_types_router.delete("/{item_id}", response_model=SuccessResponse)
def delete_package_type(
    item_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: SQLitePackageTypeRepo = Depends(get_package_type_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> SuccessResponse:
    require_permission(current_user, policy, "package_types:delete")
    return _delete(PACKAGE_TYPES, item_id, repo)


# --- Article categories ---


def _category_response(item: Any, count: int) -> ArticleCategoryResponse:
    return ArticleCategoryResponse(
        id=item.id,
        name=item.name,
        description=item.description,
        article_count=count,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


@article_categories_router.get("", response_model=list[ArticleCategoryResponse])
def list_article_categories(
    current_user: User = Depends(get_current_user),
    repo: SQLiteArticleCategoryRepo = Depends(get_article_category_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> list[ArticleCategoryResponse]:
    require_permission(current_user, policy, "article_categories:read")
    return [_category_response(item, n) for item, n in _list(ARTICLE_CATEGORIES, repo)]


@article_categories_router.post("", response_model=ArticleCategoryResponse, status_code=201)
def create_article_category(
    req: TaxonomyRequest,
    current_user: User = Depends(get_current_user),
    repo: SQLiteArticleCategoryRepo = Depends(get_article_category_repo),
    policy: PolicyEngine = Depends(get_policy),
    clock: SystemClock = Depends(get_clock),
) -> ArticleCategoryResponse:
    require_permission(current_user, policy, "article_categories:create")
    return _category_response(_create(ARTICLE_CATEGORIES, req, repo, clock), 0)


@article_categories_router.put("/{item_id}", response_model=ArticleCategoryResponse)
def update_article_category(
    item_id: UUID,
    req: TaxonomyRequest,
    current_user: User = Depends(get_current_user),
    repo: SQLiteArticleCategoryRepo = Depends(get_article_category_repo),
    policy: PolicyEngine = Depends(get_policy),
    clock: SystemClock = Depends(get_clock),
) -> ArticleCategoryResponse:
    require_permission(current_user, policy, "article_categories:edit")
    item = _update(ARTICLE_CATEGORIES, item_id, req, repo, clock)
    return _category_response(item, repo.count_usage(item.id))


@article_categories_router.delete("/{item_id}", response_model=SuccessResponse)
def delete_article_category(
    item_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: SQLiteArticleCategoryRepo = Depends(get_article_category_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> SuccessResponse:
    require_permission(current_user, policy, "article_categories:delete")
    return _delete(ARTICLE_CATEGORIES, item_id, repo)
