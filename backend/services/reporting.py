"""Month-filtered listing and aggregate views over the transactions store."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from backend.repositories.transactions_repository import TransactionsRepository
from backend.services.ingestion import IngestionService
from shared.models import (
    PRICE_BUCKETS,
    CategoryCount,
    CombinedData,
    MonthFilter,
    PriceRangeCount,
    ServiceError,
    ServiceErrorCode,
    Transaction,
    TransactionFilters,
    TransactionStatistics,
)


logger = logging.getLogger(__name__)


def _backend_error(operation: str, exc: Exception) -> ServiceError:
    logger.exception("%s_failed error=%s", operation, exc)
    return ServiceError(code=ServiceErrorCode.BACKEND_ERROR, message=str(exc))


@dataclass(slots=True)
class ReportingService:
    transactions_repository: TransactionsRepository
    ingestion_service: IngestionService | None = None

    def list_transactions(self, filters: TransactionFilters) -> list[Transaction] | ServiceError:
        try:
            return self.transactions_repository.list_transactions(filters)
        except Exception as exc:
            return _backend_error("transactions_list", exc)

    def statistics(self, filters: MonthFilter) -> TransactionStatistics | ServiceError:
        try:
            total_sale_amount, total_sold_items, total_not_sold_items = (
                self.transactions_repository.month_statistics(filters)
            )
        except Exception as exc:
            return _backend_error("transactions_statistics", exc)

        return TransactionStatistics(
            total_sale_amount=round(total_sale_amount, 2),
            total_sold_items=total_sold_items,
            total_not_sold_items=total_not_sold_items,
        )

    def price_histogram(self, filters: MonthFilter) -> list[PriceRangeCount] | ServiceError:
        """Count month rows per fixed price bucket, in ascending bucket order."""

        try:
            counts = [
                self.transactions_repository.count_in_price_bucket(filters, bucket)
                for bucket in PRICE_BUCKETS
            ]
        except Exception as exc:
            return _backend_error("transactions_price_histogram", exc)

        return [PriceRangeCount(range=bucket.label, count=count) for bucket, count in zip(PRICE_BUCKETS, counts)]

    def category_breakdown(self, filters: MonthFilter) -> list[CategoryCount] | ServiceError:
        try:
            groups = self.transactions_repository.count_by_category(filters)
        except Exception as exc:
            return _backend_error("transactions_category_breakdown", exc)

        return [CategoryCount(category=category, count=count) for category, count in groups]

    def combined_data(self, month: str) -> CombinedData | ServiceError:
        """Re-ingest, then gather every view for one month; the first failure aborts."""

        if self.ingestion_service is None:
            return ServiceError(
                code=ServiceErrorCode.BACKEND_ERROR,
                message="Ingestion service unavailable",
            )

        initialize_data = self.ingestion_service.initialize_database()
        if isinstance(initialize_data, ServiceError):
            return initialize_data

        month_filter = MonthFilter(month=month)
        transactions_data = self.list_transactions(TransactionFilters(month=month))
        if isinstance(transactions_data, ServiceError):
            return transactions_data

        statistics_data = self.statistics(month_filter)
        if isinstance(statistics_data, ServiceError):
            return statistics_data

        bar_chart_data = self.price_histogram(month_filter)
        if isinstance(bar_chart_data, ServiceError):
            return bar_chart_data

        pie_chart_data = self.category_breakdown(month_filter)
        if isinstance(pie_chart_data, ServiceError):
            return pie_chart_data

        logger.info("combined_data_built month=%s transactions=%s", month_filter.month, len(transactions_data))
        return CombinedData(
            initialize_data=initialize_data,
            transactions_data=transactions_data,
            statistics_data=statistics_data,
            bar_chart_data=bar_chart_data,
            pie_chart_data=pie_chart_data,
        )
