"""Minimal SQLite client used by backend repositories only."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SqliteSettings:
    path: str


class SqliteClient:
    """Open one connection per unit of work against a file-backed database."""

    def __init__(self, settings: SqliteSettings) -> None:
        self.settings = settings

    def _connect(self) -> sqlite3.Connection:
        if self.settings.path != ":memory:":
            Path(self.settings.path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.settings.path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that commits on success, rolls back on error and always closes."""

        conn = self._connect()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def fetch_all(self, sql: str, params: tuple[object, ...] | list[object] = ()) -> list[sqlite3.Row]:
        with self.connection() as conn:
            return conn.execute(sql, params).fetchall()

    def fetch_one(self, sql: str, params: tuple[object, ...] | list[object] = ()) -> sqlite3.Row | None:
        with self.connection() as conn:
            return conn.execute(sql, params).fetchone()

    def reset_and_load(
        self,
        *,
        schema_statements: list[str],
        insert_sql: str,
        rows: list[tuple[object, ...]],
    ) -> int:
        """Recreate the schema and insert rows inside a single transaction.

        The previous table contents survive if any statement fails.
        """

        conn = self._connect()
        # Autocommit mode so BEGIN/COMMIT below also cover the DDL statements.
        conn.isolation_level = None
        try:
            conn.execute("BEGIN")
            try:
                for statement in schema_statements:
                    conn.execute(statement)
                conn.executemany(insert_sql, rows)
            except Exception:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

        logger.info("sqlite_reset_and_load path=%s rows=%s", self.settings.path, len(rows))
        return len(rows)
