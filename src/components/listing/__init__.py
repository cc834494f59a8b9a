"""
Listing component - Filter/sort/paginate pipeline shared by every list view.
"""

from .component import resolve_list_query, run_list
from .models import (
    ALL_SENTINEL,
    AnyOf,
    Condition,
    FilterSpec,
    ListingSpec,
    ListOutput,
    ListQueryDescriptor,
    ListResultPage,
    Predicate,
    SortDirection,
)
from .ports import ListQueryPort

__all__ = [
    # Entry points
    "resolve_list_query",
    "run_list",
    # Models
    "ALL_SENTINEL",
    "AnyOf",
    "Condition",
    "FilterSpec",
    "ListingSpec",
    "ListOutput",
    "ListQueryDescriptor",
    "ListResultPage",
    "Predicate",
    "SortDirection",
    # Ports
    "ListQueryPort",
]
