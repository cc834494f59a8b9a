"""
Storefront API.

Anonymous, read-only. Only ACTIVE packages and published articles are
visible; list failures degrade to an empty page so the storefront keeps
rendering. Every route answers 503 while the site is in maintenance.
"""

from fastapi import APIRouter, Depends, Request

from src.adapters.sqlite.repos import (
    SQLiteArticleRepo,
    SQLitePackageRepo,
    SQLitePackageTypeRepo,
    SQLiteSiteSettingsRepo,
)
from src.api.deps import (
    ensure_site_online,
    get_article_repo,
    get_package_repo,
    get_package_type_repo,
    get_rules,
    get_site_settings_repo,
)
from src.api.errors import raise_for_errors
from src.api.listing import fetch_page
from src.api.schemas import (
    ArticleResponse,
    HomeResponse,
    PackageResponse,
    PackageTypeResponse,
    PageResponse,
    PublicConfigResponse,
)
from src.components.articles import PUBLIC_ARTICLE_LISTING, GetArticleInput
from src.components.articles import run_get as run_get_article
from src.components.packages import PUBLIC_PACKAGE_LISTING, GetPackageInput
from src.components.packages import run_get as run_get_package
from src.components.settings import GetSettingsInput, public_config
from src.components.settings import run_get as run_get_settings
from src.rules.models import Rules

router = APIRouter(dependencies=[Depends(ensure_site_online)])


@router.get("/home", response_model=HomeResponse)
def get_public_home(
    packages: SQLitePackageRepo = Depends(get_package_repo),
    package_types: SQLitePackageTypeRepo = Depends(get_package_type_repo),
    settings_repo: SQLiteSiteSettingsRepo = Depends(get_site_settings_repo),
    rules: Rules = Depends(get_rules),
) -> HomeResponse:
    """Site config, the latest active packages and the package types."""
    featured = fetch_page(
        {"perPage": str(rules.listing.featured_count)},
        PUBLIC_PACKAGE_LISTING,
        repo=packages,
        rules=rules,
        degrade=True,
    )
    settings = run_get_settings(GetSettingsInput(), repo=settings_repo).settings

    return HomeResponse(
        config=PublicConfigResponse(**public_config(settings)),
        featured_packages=[PackageResponse.model_validate(p) for p in featured.items],
        package_types=[
            PackageTypeResponse(
                id=t.id,
                name=t.name,
                description=t.description,
                package_count=n,
                created_at=t.created_at,
                updated_at=t.updated_at,
            )
            for t, n in package_types.list_with_counts()
        ],
    )


@router.get("/packages", response_model=PageResponse[PackageResponse])
def list_public_packages(
    request: Request,
    repo: SQLitePackageRepo = Depends(get_package_repo),
    rules: Rules = Depends(get_rules),
) -> PageResponse[PackageResponse]:
    """Active packages; supports search, typeId, maxPrice, sorting and paging."""
    page = fetch_page(
        request.query_params, PUBLIC_PACKAGE_LISTING, repo=repo, rules=rules, degrade=True
    )
    return PageResponse.from_page(page, [PackageResponse.model_validate(p) for p in page.items])


@router.get("/packages/{slug}", response_model=PackageResponse)
def get_public_package(
    slug: str,
    repo: SQLitePackageRepo = Depends(get_package_repo),
) -> PackageResponse:
    result = run_get_package(GetPackageInput(slug=slug, active_only=True), repo=repo)
    if not result.success or result.package is None:
        raise_for_errors(result.errors)
    return PackageResponse.model_validate(result.package)


@router.get("/articles", response_model=PageResponse[ArticleResponse])
def list_public_articles(
    request: Request,
    repo: SQLiteArticleRepo = Depends(get_article_repo),
    rules: Rules = Depends(get_rules),
) -> PageResponse[ArticleResponse]:
    page = fetch_page(
        request.query_params, PUBLIC_ARTICLE_LISTING, repo=repo, rules=rules, degrade=True
    )
    return PageResponse.from_page(page, [ArticleResponse.model_validate(a) for a in page.items])


@router.get("/articles/{slug}", response_model=ArticleResponse)
def get_public_article(
    slug: str,
    repo: SQLiteArticleRepo = Depends(get_article_repo),
) -> ArticleResponse:
    result = run_get_article(GetArticleInput(slug=slug, published_only=True), repo=repo)
    if not result.success or result.article is None:
        raise_for_errors(result.errors)
    return ArticleResponse.model_validate(result.article)
