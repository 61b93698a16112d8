"""Tests for dataset ingestion into the SQLite store."""

from __future__ import annotations

from shared.models import InitializeResult, ServiceError, ServiceErrorCode, TransactionFilters
from tests.fakes import SCENARIO_RECORDS, FakeSource, build_service


def test_initialize_database_loads_every_record(tmp_path) -> None:
    service = build_service(tmp_path, load=False)

    result = service.ingestion_service.initialize_database()

    assert isinstance(result, InitializeResult)
    assert result.message == "Database initialized successfully."
    assert result.inserted == len(SCENARIO_RECORDS)


def test_initialize_database_twice_keeps_a_single_copy(tmp_path) -> None:
    service = build_service(tmp_path)

    second = service.ingestion_service.initialize_database()

    assert isinstance(second, InitializeResult)
    rows = service.list_transactions(TransactionFilters(month="01"))
    assert isinstance(rows, list)
    assert len(rows) == 3


def test_initialize_database_reports_fetch_failure_as_backend_error(tmp_path, caplog) -> None:
    source = FakeSource(error=RuntimeError("Source request failed: timed out"))
    service = build_service(tmp_path, source, load=False)

    result = service.ingestion_service.initialize_database()

    assert isinstance(result, ServiceError)
    assert result.code == ServiceErrorCode.BACKEND_ERROR
    assert "timed out" in result.message
    assert "transactions_ingestion_failed" in caplog.text


def test_failed_reload_keeps_previous_rows(tmp_path) -> None:
    source = FakeSource()
    service = build_service(tmp_path, source)

    source.records = [{"dateOfSale": "2022-01-01T12:00:00Z", "price": "not a number"}]
    result = service.ingestion_service.initialize_database()

    assert isinstance(result, ServiceError)
    rows = service.list_transactions(TransactionFilters(month="01"))
    assert isinstance(rows, list)
    assert len(rows) == 3


def test_initialize_database_accepts_string_prices_and_blank_values(tmp_path) -> None:
    source = FakeSource(
        records=[
            {"dateOfSale": "2022-07-01T12:00:00Z", "productTitle": "Lamp", "price": "12.5", "category": "home"},
            {"dateOfSale": "2022-07-02T12:00:00Z", "productTitle": "Rug", "price": "", "category": "home"},
        ]
    )
    service = build_service(tmp_path, source)

    rows = service.list_transactions(TransactionFilters(month="07"))

    assert isinstance(rows, list)
    assert [(row.product_title, row.price) for row in rows] == [("Lamp", 12.5), ("Rug", None)]
