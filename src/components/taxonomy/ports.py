from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from src.core.ports.time import TimePort


class TaxonomyRepoPort(Protocol):
    def get_by_id(self, item_id: UUID) -> Any | None: ...
    def save(self, item: Any) -> Any: ...
    def delete(self, item_id: UUID) -> None: ...

    def list_with_counts(self) -> list[tuple[Any, int]]:
        """Every entry with the number of records referencing it, by name."""
        ...

    def count_usage(self, item_id: UUID) -> int: ...


__all__ = ["TaxonomyRepoPort", "TimePort"]
