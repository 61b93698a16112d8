"""Dataset ingestion: fetch the remote array and reset-and-load the store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from backend.repositories.transactions_repository import TransactionsRepository
from shared.models import InitializeResult, ServiceError, ServiceErrorCode, SourceTransaction


logger = logging.getLogger(__name__)

INITIALIZE_SUCCESS_MESSAGE = "Database initialized successfully."


class RecordSource(Protocol):
    def fetch_records(self) -> list[dict[str, Any]]:
        """Return the raw dataset objects."""


@dataclass(slots=True)
class IngestionService:
    source: RecordSource
    transactions_repository: TransactionsRepository

    def initialize_database(self) -> InitializeResult | ServiceError:
        """Replace the store contents with a fresh copy of the remote dataset.

        Running it again is safe: the table is dropped and reloaded, and a
        failure at any step leaves the previous contents in place.
        """

        try:
            raw_records = self.source.fetch_records()
            records = [SourceTransaction.model_validate(item) for item in raw_records]
            inserted = self.transactions_repository.reset_and_load(records)
        except Exception as exc:
            logger.exception("transactions_ingestion_failed error=%s", exc)
            return ServiceError(code=ServiceErrorCode.BACKEND_ERROR, message=str(exc))

        logger.info("transactions_ingested inserted=%s", inserted)
        return InitializeResult(message=INITIALIZE_SUCCESS_MESSAGE, inserted=inserted)
