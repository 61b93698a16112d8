"""Reporting utilities for backend-generated documents."""

from backend.reporting.monthly_report import (
    TRANSACTIONS_DISPLAY_LIMIT,
    MonthlyReportData,
    ReportCategoryRow,
    ReportPriceRange,
    ReportTransactionRow,
    generate_monthly_report_pdf,
)

__all__ = [
    "MonthlyReportData",
    "ReportCategoryRow",
    "ReportPriceRange",
    "ReportTransactionRow",
    "TRANSACTIONS_DISPLAY_LIMIT",
    "generate_monthly_report_pdf",
]
