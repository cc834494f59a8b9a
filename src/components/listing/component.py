"""
Listing component - query-string resolution and paginated list execution.

resolve_list_query turns raw request parameters into a validated
ListQueryDescriptor; run_list executes it against a ListQueryPort.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, TypeVar

from src.core.errors import STORE_ERROR, TIMEOUT, ValidationError

from .models import (
    ALL_SENTINEL,
    DEFAULT_PAGE,
    DEFAULT_PER_PAGE,
    AnyOf,
    Condition,
    ListingSpec,
    ListOutput,
    ListQueryDescriptor,
    ListResultPage,
    SortDirection,
)
from .ports import ListQueryPort

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _positive_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value >= 1 else default


def resolve_list_query(
    params: Mapping[str, str],
    spec: ListingSpec,
    *,
    max_per_page: int | None = None,
    default_per_page: int = DEFAULT_PER_PAGE,
) -> ListQueryDescriptor:
    """
    Build a ListQueryDescriptor from raw query parameters.

    Never fails: unusable values fall back to their defaults and unknown
    keys are ignored.
    """
    page = _positive_int(params.get("page"), DEFAULT_PAGE)
    per_page = _positive_int(params.get("perPage"), default_per_page)
    if max_per_page is not None:
        per_page = min(per_page, max_per_page)

    conditions: list[Condition | AnyOf] = list(spec.base_predicate)

    search = (params.get("search") or "").strip()
    if search and spec.search_fields:
        conditions.append(
            AnyOf(tuple(Condition(f, "icontains", search) for f in spec.search_fields))
        )

    for key, filter_spec in spec.filters.items():
        raw = params.get(key)
        if raw is None:
            continue
        raw = raw.strip()
        if not raw or raw == ALL_SENTINEL:
            continue

        value: Any = raw
        if filter_spec.coerce is not None:
            try:
                value = filter_spec.coerce(raw)
            except ValueError:
                continue
        conditions.append(Condition(filter_spec.field, filter_spec.op, value))

    sort_by = params.get("sortBy") or spec.default_sort
    sort_field = spec.sortable.get(sort_by, spec.default_sort_field)

    sort_order = (params.get("sortOrder") or "").strip().lower()
    direction = SortDirection.ASC if sort_order == "asc" else SortDirection.DESC

    return ListQueryDescriptor(
        predicate=tuple(conditions),
        sort_field=sort_field,
        sort_direction=direction,
        page_number=page,
        page_size=per_page,
    )


def run_list(
    descriptor: ListQueryDescriptor,
    *,
    repo: ListQueryPort[T],
    timeout_seconds: float | None = None,
) -> ListOutput[T]:
    """
    Fetch one page and the total count for a descriptor.

    Both queries use the identical predicate and run concurrently. Either
    one failing fails the whole operation; nothing partial is returned.
    """
    pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="list-query")
    try:
        count_future = pool.submit(repo.count, descriptor.predicate)
        page_future = pool.submit(
            repo.find_page,
            descriptor.predicate,
            sort_field=descriptor.sort_field,
            descending=descriptor.descending,
            offset=descriptor.offset,
            limit=descriptor.page_size,
        )
        _, not_done = wait([count_future, page_future], timeout=timeout_seconds)
        if not_done:
            logger.warning("List query timed out after %ss", timeout_seconds)
            return ListOutput(
                errors=[
                    ValidationError(
                        code=TIMEOUT,
                        message="The list query took too long. Please retry.",
                    )
                ],
                success=False,
            )

        try:
            total = count_future.result()
            items = page_future.result()
        except Exception:
            logger.exception("List query failed")
            return ListOutput(
                errors=[ValidationError(code=STORE_ERROR, message="Failed to load records")],
                success=False,
            )
    finally:
        # Do not block the request on a query that overran its timeout
        pool.shutdown(wait=False, cancel_futures=True)

    return ListOutput(
        page=ListResultPage(
            items=list(items),
            total_count=total,
            page_number=descriptor.page_number,
            page_size=descriptor.page_size,
        )
    )
