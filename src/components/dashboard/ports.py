from __future__ import annotations

from typing import Any, Protocol

from src.components.listing.ports import ListQueryPort
from src.domain.entities import Article, TravelPackage


class PackageStatsPort(ListQueryPort[TravelPackage], Protocol):
    def total_contacts(self) -> int:
        """Sum of contact_count over every package."""
        ...


ArticleStatsPort = ListQueryPort[Article]


class TypeStatsPort(Protocol):
    def list_with_counts(self) -> list[tuple[Any, int]]: ...
