from fastapi import APIRouter, Depends

from src.adapters.sqlite.repos import SQLiteArticleRepo, SQLitePackageRepo, SQLitePackageTypeRepo
from src.api.deps import (
    get_article_repo,
    get_current_user,
    get_package_repo,
    get_package_type_repo,
    get_policy,
    get_rules,
    require_permission,
)
from src.api.errors import raise_for_errors
from src.api.schemas import (
    ArticleResponse,
    DashboardResponse,
    DashboardTotalsResponse,
    PackageResponse,
    TypeStatResponse,
)
from src.components.dashboard import DashboardInput, run_dashboard
from src.domain.entities import User
from src.domain.policy import PolicyEngine
from src.rules.models import Rules

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    current_user: User = Depends(get_current_user),
    packages: SQLitePackageRepo = Depends(get_package_repo),
    articles: SQLiteArticleRepo = Depends(get_article_repo),
    package_types: SQLitePackageTypeRepo = Depends(get_package_type_repo),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> DashboardResponse:
    """Back-office overview: totals, latest items, trending packages, per-type counts."""
    require_permission(current_user, policy, "dashboard:read")

    result = run_dashboard(
        DashboardInput(list_size=rules.listing.dashboard_count),
        packages=packages,
        articles=articles,
        package_types=package_types,
    )
    if not result.success:
        raise_for_errors(result.errors)

    return DashboardResponse(
        totals=DashboardTotalsResponse.model_validate(result.totals),
        recent_packages=[PackageResponse.model_validate(p) for p in result.recent_packages],
        recent_articles=[ArticleResponse.model_validate(a) for a in result.recent_articles],
        trending_packages=[PackageResponse.model_validate(p) for p in result.trending_packages],
        packages_by_type=[TypeStatResponse.model_validate(t) for t in result.packages_by_type],
    )
