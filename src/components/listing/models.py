"""
Listing component input/output models.

A list request moves through three shapes:
query-string mapping -> ListQueryDescriptor -> ListResultPage.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

from src.core.errors import TIMEOUT, ValidationError

T = TypeVar("T")

ConditionOp = Literal["eq", "icontains", "lte"]

ALL_SENTINEL = "ALL"
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 5


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


# --- Predicate ---


@dataclass(frozen=True)
class Condition:
    """A single field-level condition."""

    field: str
    op: ConditionOp
    value: Any


@dataclass(frozen=True)
class AnyOf:
    """OR-combination of conditions (used for free-text search)."""

    conditions: tuple[Condition, ...]


# Top-level entries are AND-combined
Predicate = tuple[Condition | AnyOf, ...]


# --- Per-entity listing configuration ---


@dataclass(frozen=True)
class FilterSpec:
    """How one query-string key becomes a condition."""

    field: str
    op: ConditionOp = "eq"
    # Raises ValueError for values that should be ignored
    coerce: Callable[[str], Any] | None = None


@dataclass(frozen=True)
class ListingSpec:
    """Filterable, searchable and sortable fields of one entity list."""

    name: str
    search_fields: tuple[str, ...]
    filters: Mapping[str, FilterSpec] = field(default_factory=dict)
    # Wire name (as sent in sortBy) -> entity field
    sortable: Mapping[str, str] = field(default_factory=dict)
    default_sort: str = "createdAt"
    # Always applied (e.g. storefront shows ACTIVE packages only)
    base_predicate: Predicate = ()

    def __post_init__(self) -> None:
        if self.default_sort not in self.sortable:
            raise ValueError(
                f"Listing '{self.name}': default sort '{self.default_sort}' is not sortable"
            )

    @property
    def default_sort_field(self) -> str:
        return self.sortable[self.default_sort]


# --- Descriptor ---


@dataclass(frozen=True)
class ListQueryDescriptor:
    """Resolved, validated filter/sort/page parameters of a list request."""

    predicate: Predicate = ()
    sort_field: str = "created_at"
    sort_direction: SortDirection = SortDirection.DESC
    page_number: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PER_PAGE

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError("page_number must be >= 1")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size

    @property
    def descending(self) -> bool:
        return self.sort_direction is SortDirection.DESC


# --- Result ---


@dataclass(frozen=True)
class ListResultPage(Generic[T]):
    """One page of results plus the totals needed for pagination controls."""

    items: list[T]
    total_count: int
    page_number: int
    page_size: int

    @property
    def total_pages(self) -> int:
        if self.total_count <= 0:
            return 0
        return -(-self.total_count // self.page_size)

    @classmethod
    def empty(cls, descriptor: ListQueryDescriptor) -> ListResultPage[T]:
        return cls(
            items=[],
            total_count=0,
            page_number=descriptor.page_number,
            page_size=descriptor.page_size,
        )


@dataclass(frozen=True)
class ListOutput(Generic[T]):
    """Output of the list request handler."""

    page: ListResultPage[T] | None = None
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True

    @property
    def retryable(self) -> bool:
        return any(e.code == TIMEOUT for e in self.errors)
