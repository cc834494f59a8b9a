"""
Dashboard component - back-office overview figures.
"""

from __future__ import annotations

import logging

from src.core.errors import STORE_ERROR, ValidationError

from .models import DashboardInput, DashboardOutput, DashboardTotals, TypeStat
from .ports import ArticleStatsPort, PackageStatsPort, TypeStatsPort

logger = logging.getLogger(__name__)


def run_dashboard(
    inp: DashboardInput,
    *,
    packages: PackageStatsPort,
    articles: ArticleStatsPort,
    package_types: TypeStatsPort,
) -> DashboardOutput:
    """
    Collect totals, the latest packages and articles, the most contacted
    packages, and package counts per type.
    """
    size = inp.list_size
    try:
        totals = DashboardTotals(
            packages=packages.count(()),
            articles=articles.count(()),
            contacts=packages.total_contacts(),
        )
        recent_packages = packages.find_page(
            (), sort_field="created_at", descending=True, offset=0, limit=size
        )
        recent_articles = articles.find_page(
            (), sort_field="created_at", descending=True, offset=0, limit=size
        )
        trending = packages.find_page(
            (), sort_field="contact_count", descending=True, offset=0, limit=size
        )
        by_type = [
            TypeStat(type_id=t.id, name=t.name, package_count=n)
            for t, n in package_types.list_with_counts()
        ]
    except Exception:
        logger.exception("Loading dashboard figures failed")
        return DashboardOutput(
            errors=[ValidationError(code=STORE_ERROR, message="Failed to load dashboard")],
            success=False,
        )

    return DashboardOutput(
        totals=totals,
        recent_packages=recent_packages,
        recent_articles=recent_articles,
        trending_packages=trending,
        packages_by_type=by_type,
    )
