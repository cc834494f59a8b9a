"""
Listing component port definitions.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from .models import Predicate

T_co = TypeVar("T_co", covariant=True)


class ListQueryPort(Protocol[T_co]):
    """Entity-query capability: count + paginated fetch over one predicate."""

    def count(self, predicate: Predicate) -> int:
        """Count rows matching the predicate."""
        ...

    def find_page(
        self,
        predicate: Predicate,
        *,
        sort_field: str,
        descending: bool,
        offset: int,
        limit: int,
    ) -> list[T_co]:
        """Fetch rows matching the predicate: sort, then skip offset, take limit."""
        ...
