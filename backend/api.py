"""FastAPI entrypoint for the transactions reporting endpoints."""

from __future__ import annotations

import calendar
import logging
from functools import lru_cache
from typing import Any

from fastapi import FastAPI, Query
from fastapi.requests import Request
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware

from shared import config as _config
from backend.factory import build_reporting_service
from backend.reporting import (
    MonthlyReportData,
    ReportCategoryRow,
    ReportPriceRange,
    ReportTransactionRow,
    TRANSACTIONS_DISPLAY_LIMIT,
    generate_monthly_report_pdf,
)
from backend.services.reporting import ReportingService
from shared.models import (
    CategoryCount,
    CombinedData,
    InitializeResult,
    MAX_SQLITE_INTEGER,
    MonthFilter,
    PriceRangeCount,
    ServiceError,
    Transaction,
    TransactionFilters,
    TransactionStatistics,
)


logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR_BODY = {"error": "Internal Server Error"}
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
CALENDAR_MONTHS = frozenset(f"{number:02d}" for number in range(1, 13))


@lru_cache(maxsize=1)
def get_reporting_service() -> ReportingService:
    """Create and cache the reporting service once per process."""
    return build_reporting_service()


def _internal_error_response(error: ServiceError) -> JSONResponse:
    logger.error("service_error code=%s message=%s", error.code.value, error.message)
    return JSONResponse(status_code=500, content=INTERNAL_SERVER_ERROR_BODY)


def _parse_positive_int(value: str | None, default: int) -> int:
    """Parse a query value leniently: missing, non-numeric or < 1 yields the default.

    Values above the SQLite integer range are clamped to it.
    """

    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    if parsed < 1:
        return default
    return min(parsed, MAX_SQLITE_INTEGER)


def _month_label(month: str | None) -> str:
    if month in CALENDAR_MONTHS:
        return calendar.month_name[int(month)]
    return month or "-"


app = FastAPI(title="Product Transactions Reporting API")

ALLOW_ORIGINS = _config.cors_allow_origins()


@app.middleware("http")
async def log_http_requests(request: Request, call_next):
    """Log incoming requests, HTTP status codes and unexpected errors."""

    logger.info("http_request_received method=%s path=%s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "http_request_failed method=%s path=%s",
            request.method,
            request.url.path,
        )
        raise

    logger.info(
        "http_response_sent method=%s path=%s status_code=%s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("cors_allow_origins=%s", ALLOW_ORIGINS)


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for unhandled exceptions."""

    logger.exception(
        "unhandled_exception method=%s path=%s exception_type=%s message=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content=INTERNAL_SERVER_ERROR_BODY)


@app.get("/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""

    return {"status": "ok"}


@app.get("/initialize-database", response_model=InitializeResult)
def initialize_database() -> Any:
    """Reset the store and load the remote dataset."""

    ingestion_service = get_reporting_service().ingestion_service
    if ingestion_service is None:
        logger.error("ingestion_service_unavailable")
        return JSONResponse(status_code=500, content=INTERNAL_SERVER_ERROR_BODY)

    result = ingestion_service.initialize_database()
    if isinstance(result, ServiceError):
        return _internal_error_response(result)
    return result


@app.get("/transactions", response_model=list[Transaction])
def list_transactions(
    month: str | None = None,
    page: str | None = None,
    per_page: str | None = Query(default=None, alias="perPage"),
    search: str | None = None,
) -> Any:
    filters = TransactionFilters(
        month=month,
        page=_parse_positive_int(page, DEFAULT_PAGE),
        per_page=_parse_positive_int(per_page, DEFAULT_PER_PAGE),
        search=search,
    )
    result = get_reporting_service().list_transactions(filters)
    if isinstance(result, ServiceError):
        return _internal_error_response(result)
    return result


@app.get("/statistics", response_model=TransactionStatistics)
def get_statistics(month: str | None = None) -> Any:
    result = get_reporting_service().statistics(MonthFilter(month=month))
    if isinstance(result, ServiceError):
        return _internal_error_response(result)
    return result


@app.get("/bar-chart", response_model=list[PriceRangeCount])
def get_bar_chart(month: str | None = None) -> Any:
    result = get_reporting_service().price_histogram(MonthFilter(month=month))
    if isinstance(result, ServiceError):
        return _internal_error_response(result)
    return result


@app.get("/pie-chart", response_model=list[CategoryCount])
def get_pie_chart(month: str | None = None) -> Any:
    result = get_reporting_service().category_breakdown(MonthFilter(month=month))
    if isinstance(result, ServiceError):
        return _internal_error_response(result)
    return result


@app.get("/combined-data", response_model=CombinedData)
def get_combined_data() -> Any:
    """Re-ingest and return every view for the configured month in one payload."""

    month = _config.combined_data_month()
    logger.info("combined_data_requested month=%s", month)
    result = get_reporting_service().combined_data(month)
    if isinstance(result, ServiceError):
        return _internal_error_response(result)
    return result


@app.get("/reports/monthly.pdf")
def get_monthly_report_pdf(month: str | None = None) -> Response:
    service = get_reporting_service()
    month_filter = MonthFilter(month=month)
    logger.info("monthly_report_requested month=%s", month_filter.month)

    statistics = service.statistics(month_filter)
    if isinstance(statistics, ServiceError):
        return _internal_error_response(statistics)

    price_ranges = service.price_histogram(month_filter)
    if isinstance(price_ranges, ServiceError):
        return _internal_error_response(price_ranges)

    categories = service.category_breakdown(month_filter)
    if isinstance(categories, ServiceError):
        return _internal_error_response(categories)

    # One extra row tells whether the detail table is truncated.
    transactions = service.list_transactions(
        TransactionFilters(month=month_filter.month, per_page=TRANSACTIONS_DISPLAY_LIMIT + 1)
    )
    if isinstance(transactions, ServiceError):
        return _internal_error_response(transactions)

    pdf_bytes = generate_monthly_report_pdf(
        MonthlyReportData(
            period_label=_month_label(month_filter.month),
            total_sale_amount=statistics.total_sale_amount,
            total_sold_items=statistics.total_sold_items,
            total_not_sold_items=statistics.total_not_sold_items,
            price_ranges=[ReportPriceRange(label=row.range, count=row.count) for row in price_ranges],
            categories=[
                ReportCategoryRow(name=row.category or "Uncategorized", count=row.count)
                for row in categories
            ],
            transactions=[
                ReportTransactionRow(
                    date=(row.date_of_sale or "")[:10],
                    title=row.product_title or "",
                    category=row.category or "Uncategorized",
                    price=row.price,
                )
                for row in transactions[:TRANSACTIONS_DISPLAY_LIMIT]
            ],
            transactions_truncated=len(transactions) > TRANSACTIONS_DISPLAY_LIMIT,
        )
    )
    filename_month = month_filter.month if month_filter.month in CALENDAR_MONTHS else "all"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="sales-report-{filename_month}.pdf"'},
    )
