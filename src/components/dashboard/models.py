"""
Dashboard component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from src.core.errors import ValidationError
from src.domain.entities import Article, TravelPackage


@dataclass(frozen=True)
class DashboardInput:
    # How many rows each "recent" / "trending" list holds
    list_size: int = 5


@dataclass(frozen=True)
class TypeStat:
    type_id: UUID
    name: str
    package_count: int


@dataclass(frozen=True)
class DashboardTotals:
    packages: int = 0
    articles: int = 0
    contacts: int = 0


@dataclass(frozen=True)
class DashboardOutput:
    totals: DashboardTotals = field(default_factory=DashboardTotals)
    recent_packages: list[TravelPackage] = field(default_factory=list)
    recent_articles: list[Article] = field(default_factory=list)
    trending_packages: list[TravelPackage] = field(default_factory=list)
    packages_by_type: list[TypeStat] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True
