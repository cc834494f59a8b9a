import threading
from typing import Any

import pytest

from src.components.listing import (
    Condition,
    ListQueryDescriptor,
    SortDirection,
    run_list,
)
from src.components.listing.models import Predicate
from src.core.errors import STORE_ERROR, TIMEOUT


class MockListRepo:
    """Serves a fixed list; records what it was asked for."""

    def __init__(self, rows: list[Any]) -> None:
        self.rows = rows
        self.count_predicates: list[Predicate] = []
        self.page_calls: list[dict[str, Any]] = []

    def count(self, predicate: Predicate) -> int:
        self.count_predicates.append(predicate)
        return len(self.rows)

    def find_page(
        self,
        predicate: Predicate,
        *,
        sort_field: str,
        descending: bool,
        offset: int,
        limit: int,
    ) -> list[Any]:
        self.page_calls.append(
            {
                "predicate": predicate,
                "sort_field": sort_field,
                "descending": descending,
                "offset": offset,
                "limit": limit,
            }
        )
        return self.rows[offset : offset + limit]


class BlockingRepo(MockListRepo):
    """count() blocks until released, to simulate a stuck query."""

    def __init__(self) -> None:
        super().__init__([])
        self.release = threading.Event()

    def count(self, predicate: Predicate) -> int:
        self.release.wait(5)
        return 0


class FailingRepo(MockListRepo):
    def find_page(self, predicate: Predicate, **kwargs: Any) -> list[Any]:
        raise RuntimeError("disk I/O error")


def test_page_two_of_twelve() -> None:
    repo = MockListRepo(list(range(1, 13)))
    descriptor = ListQueryDescriptor(page_number=2, page_size=5)

    result = run_list(descriptor, repo=repo)

    assert result.success
    assert result.page is not None
    assert result.page.items == [6, 7, 8, 9, 10]
    assert result.page.total_count == 12
    assert result.page.total_pages == 3


def test_last_page_is_short() -> None:
    repo = MockListRepo(list(range(1, 13)))

    result = run_list(ListQueryDescriptor(page_number=3, page_size=5), repo=repo)

    assert result.page is not None
    assert result.page.items == [11, 12]


def test_page_past_the_end_is_empty_not_an_error() -> None:
    repo = MockListRepo(list(range(3)))

    result = run_list(ListQueryDescriptor(page_number=9, page_size=5), repo=repo)

    assert result.success
    assert result.page is not None
    assert result.page.items == []
    assert result.page.total_count == 3


def test_count_and_page_use_the_same_predicate() -> None:
    repo = MockListRepo([])
    predicate = (Condition("status", "eq", "ACTIVE"),)
    descriptor = ListQueryDescriptor(
        predicate=predicate,
        sort_field="price",
        sort_direction=SortDirection.ASC,
        page_number=3,
        page_size=10,
    )

    run_list(descriptor, repo=repo)

    assert repo.count_predicates == [predicate]
    assert repo.page_calls == [
        {
            "predicate": predicate,
            "sort_field": "price",
            "descending": False,
            "offset": 20,
            "limit": 10,
        }
    ]


def test_store_failure_returns_no_partial_page(caplog: pytest.LogCaptureFixture) -> None:
    result = run_list(ListQueryDescriptor(), repo=FailingRepo([1, 2, 3]))

    assert not result.success
    assert result.page is None
    assert [e.code for e in result.errors] == [STORE_ERROR]
    assert not result.retryable
    assert "List query failed" in caplog.text


def test_timeout_is_retryable() -> None:
    repo = BlockingRepo()
    try:
        result = run_list(ListQueryDescriptor(), repo=repo, timeout_seconds=0.05)
    finally:
        repo.release.set()

    assert not result.success
    assert result.page is None
    assert [e.code for e in result.errors] == [TIMEOUT]
    assert result.retryable
