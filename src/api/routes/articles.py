from uuid import UUID

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import FormData

from src.adapters.clock import SystemClock
from src.adapters.fs.filestore import FileSystemImageStore
from src.adapters.sqlite.repos import SQLiteArticleCategoryRepo, SQLiteArticleRepo
from src.api.deps import (
    get_article_category_repo,
    get_article_repo,
    get_clock,
    get_current_user,
    get_image_store,
    get_policy,
    get_rules,
    get_upload_policy,
    require_permission,
)
from src.api.errors import raise_for_errors
from src.api.forms import form_fields, is_checked, read_form, read_upload
from src.api.listing import fetch_page
from src.api.schemas import ArticleResponse, PageResponse, SuccessResponse
from src.components.articles import (
    ARTICLE_LISTING,
    CreateArticleInput,
    DeleteArticleInput,
    GetArticleInput,
    UpdateArticleInput,
    run_create,
    run_delete,
    run_get,
    run_update,
)
from src.components.media.models import UploadPolicy
from src.domain.entities import User
from src.domain.policy import PolicyEngine
from src.rules.models import Rules

router = APIRouter()

ARTICLE_FORM_FIELDS = {
    "title": "title",
    "content": "content",
    "excerpt": "excerpt",
    "categoryId": "category_id",
}


def _article_fields(form: FormData) -> dict[str, object]:
    fields: dict[str, object] = dict(form_fields(form, ARTICLE_FORM_FIELDS))
    fields["published"] = is_checked(form.get("published"))
    return fields


@router.get("", response_model=PageResponse[ArticleResponse])
def list_articles(
    request: Request,
    current_user: User = Depends(get_current_user),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> PageResponse[ArticleResponse]:
    require_permission(current_user, policy, "articles:read")

    page = fetch_page(request.query_params, ARTICLE_LISTING, repo=repo, rules=rules)
    return PageResponse.from_page(page, [ArticleResponse.model_validate(a) for a in page.items])


@router.get("/{article_id}", response_model=ArticleResponse)
def get_article(
    article_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> ArticleResponse:
    require_permission(current_user, policy, "articles:read")

    result = run_get(GetArticleInput(article_id=article_id), repo=repo)
    if not result.success or result.article is None:
        raise_for_errors(result.errors)
    return ArticleResponse.model_validate(result.article)


@router.post("", response_model=ArticleResponse, status_code=201)
def create_article(
    form: FormData = Depends(read_form),
    current_user: User = Depends(get_current_user),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
    category_repo: SQLiteArticleCategoryRepo = Depends(get_article_category_repo),
    storage: FileSystemImageStore = Depends(get_image_store),
    clock: SystemClock = Depends(get_clock),
    upload_policy: UploadPolicy = Depends(get_upload_policy),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> ArticleResponse:
    require_permission(current_user, policy, "articles:create")

    inp = CreateArticleInput(fields=_article_fields(form), image=read_upload(form.get("image")))
    result = run_create(
        inp,
        repo=repo,
        category_repo=category_repo,
        storage=storage,
        time=clock,
        upload_policy=upload_policy,
        storage_timeout=rules.timeouts.storage_seconds,
    )
    if not result.success or result.article is None:
        raise_for_errors(result.errors, fallback="Invalid article data")
    return ArticleResponse.model_validate(result.article)


@router.put("/{article_id}", response_model=ArticleResponse)
def update_article(
    article_id: UUID,
    form: FormData = Depends(read_form),
    current_user: User = Depends(get_current_user),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
    category_repo: SQLiteArticleCategoryRepo = Depends(get_article_category_repo),
    storage: FileSystemImageStore = Depends(get_image_store),
    clock: SystemClock = Depends(get_clock),
    upload_policy: UploadPolicy = Depends(get_upload_policy),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> ArticleResponse:
    require_permission(current_user, policy, "articles:edit")

    inp = UpdateArticleInput(
        article_id=article_id,
        fields=_article_fields(form),
        image=read_upload(form.get("image")),
        remove_image=is_checked(form.get("removeImage")),
    )
    result = run_update(
        inp,
        repo=repo,
        category_repo=category_repo,
        storage=storage,
        time=clock,
        upload_policy=upload_policy,
        storage_timeout=rules.timeouts.storage_seconds,
    )
    if not result.success or result.article is None:
        raise_for_errors(result.errors, fallback="Invalid article data")
    return ArticleResponse.model_validate(result.article)


@router.delete("/{article_id}", response_model=SuccessResponse)
def delete_article(
    article_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
    storage: FileSystemImageStore = Depends(get_image_store),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> SuccessResponse:
    require_permission(current_user, policy, "articles:delete")

    result = run_delete(
        DeleteArticleInput(article_id=article_id),
        repo=repo,
        storage=storage,
        storage_timeout=rules.timeouts.storage_seconds,
    )
    if not result.success:
        raise_for_errors(result.errors)
    return SuccessResponse()
