"""Composition root for backend services."""

from __future__ import annotations

from backend.db.source_client import SourceClient, SourceSettings
from backend.db.sqlite_client import SqliteClient, SqliteSettings
from backend.repositories.transactions_repository import SqliteTransactionsRepository
from backend.services.ingestion import IngestionService
from backend.services.reporting import ReportingService
from shared import config


def build_reporting_service() -> ReportingService:
    """Build the reporting service over the configured SQLite file and dataset URL."""

    transactions_repository = SqliteTransactionsRepository(
        client=SqliteClient(settings=SqliteSettings(path=config.database_path()))
    )
    source = SourceClient(
        settings=SourceSettings(
            url=config.source_url(),
            timeout_seconds=config.source_timeout_seconds(),
        )
    )
    ingestion_service = IngestionService(
        source=source,
        transactions_repository=transactions_repository,
    )
    return ReportingService(
        transactions_repository=transactions_repository,
        ingestion_service=ingestion_service,
    )
