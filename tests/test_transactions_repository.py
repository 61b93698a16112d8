"""Tests for the SQLite transactions repository."""

from __future__ import annotations

import sqlite3

import pytest

from backend.repositories.transactions_repository import SqliteTransactionsRepository
from shared.models import PRICE_BUCKETS, MonthFilter, SourceTransaction, TransactionFilters
from tests.fakes import SCENARIO_RECORDS, build_repository


def _load(repository: SqliteTransactionsRepository, records: list[dict[str, object]]) -> int:
    return repository.reset_and_load([SourceTransaction.model_validate(record) for record in records])


def _record(month: str, day: int, price: float | None, *, title: str = "Item", category: str = "misc") -> dict[str, object]:
    return {
        "dateOfSale": f"2022-{month}-{day:02d}T12:00:00+05:30",
        "productTitle": title,
        "productDescription": f"{title} description",
        "price": price,
        "category": category,
    }


@pytest.fixture
def repository(tmp_path) -> SqliteTransactionsRepository:
    repository = build_repository(tmp_path)
    _load(repository, SCENARIO_RECORDS)
    return repository


def test_reset_and_load_assigns_ids_and_drops_extra_keys(repository) -> None:
    rows = repository.list_transactions(TransactionFilters(month="01"))

    assert [row.id for row in rows] == [1, 2, 3]
    assert rows[0].product_title == "Fjallraven Backpack"
    assert rows[0].model_dump(by_alias=True) == {
        "id": 1,
        "dateOfSale": "2022-01-05T12:00:00+05:30",
        "productTitle": "Fjallraven Backpack",
        "productDescription": "Fits 15 inch laptops",
        "price": 50.0,
        "category": "A",
    }


def test_list_transactions_matches_month_across_years(repository) -> None:
    rows = repository.list_transactions(TransactionFilters(month="01"))

    assert {row.date_of_sale[:7] for row in rows} == {"2022-01", "2021-01"}


def test_list_transactions_with_missing_month_matches_nothing(repository) -> None:
    assert repository.list_transactions(TransactionFilters()) == []


def test_list_transactions_search_covers_title_description_and_price(repository) -> None:
    by_title = repository.list_transactions(TransactionFilters(month="01", search="backpack"))
    by_description = repository.list_transactions(TransactionFilters(month="01", search="OUTERWEAR"))
    by_price = repository.list_transactions(TransactionFilters(month="01", search="250"))

    assert [row.product_title for row in by_title] == ["Fjallraven Backpack"]
    assert [row.product_title for row in by_description] == ["Mens Cotton Jacket"]
    assert [row.product_title for row in by_price] == ["Mens Cotton Jacket"]


def test_list_transactions_search_stays_inside_month(repository) -> None:
    assert repository.list_transactions(TransactionFilters(month="01", search="Bracelet")) == []


def test_pagination_pages_never_exceed_per_page_and_cover_the_month(tmp_path) -> None:
    repository = build_repository(tmp_path)
    _load(
        repository,
        [_record("04", day, float(day * 10), title=f"Item {day}") for day in range(1, 24)]
        + [_record("05", 1, 5.0)],
    )

    per_page = 5
    pages = [
        repository.list_transactions(TransactionFilters(month="04", page=page, per_page=per_page))
        for page in range(1, 6)
    ]

    assert all(len(page) <= per_page for page in pages)
    ids = [row.id for page in pages for row in page]
    assert len(ids) == 23
    assert len(set(ids)) == 23
    assert repository.list_transactions(TransactionFilters(month="04", page=6, per_page=per_page)) == []


def test_month_statistics_counts_all_rows_as_sold(repository) -> None:
    total, sold, not_sold = repository.month_statistics(MonthFilter(month="01"))

    assert total == 300.0
    assert sold == 3
    assert not_sold == 1


def test_month_statistics_are_zero_for_unmatched_month(repository) -> None:
    assert repository.month_statistics(MonthFilter(month="13")) == (0.0, 0, 0)
    assert repository.month_statistics(MonthFilter()) == (0.0, 0, 0)


def test_count_in_price_bucket_uses_inclusive_integer_bounds(tmp_path) -> None:
    repository = build_repository(tmp_path)
    _load(
        repository,
        [
            _record("06", 1, 0),
            _record("06", 2, 100),
            _record("06", 3, 101),
            _record("06", 4, 200),
            _record("06", 5, 100.5),
            _record("06", 6, 901),
            _record("06", 7, 123456),
            _record("06", 8, None),
        ],
    )
    month = MonthFilter(month="06")

    counts = [repository.count_in_price_bucket(month, bucket) for bucket in PRICE_BUCKETS]

    assert counts == [3, 2, 0, 0, 0, 0, 0, 0, 0, 2]


def test_count_by_category_groups_month_rows(repository) -> None:
    assert repository.count_by_category(MonthFilter(month="01")) == [("A", 2), ("B", 1)]
    assert repository.count_by_category(MonthFilter(month="08")) == []


def test_reset_and_load_is_idempotent(repository) -> None:
    _load(repository, SCENARIO_RECORDS)

    rows = repository.list_transactions(TransactionFilters(month="01"))

    assert [row.id for row in rows] == [1, 2, 3]


def test_queries_before_first_load_raise_store_error(tmp_path) -> None:
    repository = build_repository(tmp_path)

    with pytest.raises(sqlite3.OperationalError, match="no such table"):
        repository.list_transactions(TransactionFilters(month="01"))
