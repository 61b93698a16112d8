"""Transactions repository adapters.

Every statement filters on the month component of `dateOfSale`, matched as a
two-digit string through SQLite's `strftime('%m', ...)`.
"""

from __future__ import annotations

import sqlite3
from typing import Protocol

from backend.db.sqlite_client import SqliteClient
from shared.models import MonthFilter, PriceBucket, SourceTransaction, Transaction, TransactionFilters


TRANSACTIONS_TABLE = "transactions"

_MONTH_CLAUSE = "strftime('%m', dateOfSale) = ?"

DROP_TABLE_SQL = f"DROP TABLE IF EXISTS {TRANSACTIONS_TABLE}"
CREATE_TABLE_SQL = f"""
    CREATE TABLE {TRANSACTIONS_TABLE} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        dateOfSale TEXT,
        productTitle TEXT,
        productDescription TEXT,
        price REAL,
        category TEXT
    )
"""
INSERT_SQL = (
    f"INSERT INTO {TRANSACTIONS_TABLE} "
    "(dateOfSale, productTitle, productDescription, price, category) VALUES (?, ?, ?, ?, ?)"
)


class TransactionsRepository(Protocol):
    def reset_and_load(self, records: list[SourceTransaction]) -> int:
        """Drop and recreate the table, then insert records; return inserted count."""

    def list_transactions(self, filters: TransactionFilters) -> list[Transaction]:
        """Return one page of month transactions, optionally narrowed by search."""

    def month_statistics(self, filters: MonthFilter) -> tuple[float, int, int]:
        """Return price sum, row count and null-price row count for the month."""

    def count_in_price_bucket(self, filters: MonthFilter, bucket: PriceBucket) -> int:
        """Return the number of month rows whose price falls in the bucket."""

    def count_by_category(self, filters: MonthFilter) -> list[tuple[str | None, int]]:
        """Return (category, count) pairs for categories present in the month."""


class SqliteTransactionsRepository:
    """SQLite repository over the `transactions` table."""

    def __init__(self, client: SqliteClient) -> None:
        self._client = client

    def reset_and_load(self, records: list[SourceTransaction]) -> int:
        rows = [
            (
                record.date_of_sale,
                record.product_title,
                record.product_description,
                record.price,
                record.category,
            )
            for record in records
        ]
        return self._client.reset_and_load(
            schema_statements=[DROP_TABLE_SQL, CREATE_TABLE_SQL],
            insert_sql=INSERT_SQL,
            rows=rows,
        )

    @staticmethod
    def _build_list_query(filters: TransactionFilters) -> tuple[str, list[object]]:
        query = f"SELECT * FROM {TRANSACTIONS_TABLE} WHERE {_MONTH_CLAUSE}"
        params: list[object] = [filters.month]

        if filters.search:
            needle = f"%{filters.search}%"
            query += " AND (productTitle LIKE ? OR productDescription LIKE ? OR price LIKE ?)"
            params.extend([needle, needle, needle])

        query += " ORDER BY id LIMIT ? OFFSET ?"
        params.extend([filters.per_page, filters.offset])
        return query, params

    @staticmethod
    def _parse_row(row: sqlite3.Row | dict[str, object]) -> Transaction:
        return Transaction(
            id=row["id"],
            date_of_sale=row["dateOfSale"],
            product_title=row["productTitle"],
            product_description=row["productDescription"],
            price=row["price"],
            category=row["category"],
        )

    def list_transactions(self, filters: TransactionFilters) -> list[Transaction]:
        query, params = self._build_list_query(filters)
        rows = self._client.fetch_all(query, params)
        return [self._parse_row(row) for row in rows]

    def month_statistics(self, filters: MonthFilter) -> tuple[float, int, int]:
        sum_row = self._client.fetch_one(
            f"SELECT SUM(price) AS totalSaleAmount FROM {TRANSACTIONS_TABLE} WHERE {_MONTH_CLAUSE}",
            (filters.month,),
        )
        # Counts every month row, priced or not.
        sold_row = self._client.fetch_one(
            f"SELECT COUNT(id) AS totalSoldItems FROM {TRANSACTIONS_TABLE} WHERE {_MONTH_CLAUSE}",
            (filters.month,),
        )
        not_sold_row = self._client.fetch_one(
            f"SELECT COUNT(id) AS totalNotSoldItems FROM {TRANSACTIONS_TABLE} "
            f"WHERE {_MONTH_CLAUSE} AND price IS NULL",
            (filters.month,),
        )

        total_sale_amount = (sum_row["totalSaleAmount"] if sum_row else None) or 0
        total_sold_items = (sold_row["totalSoldItems"] if sold_row else None) or 0
        total_not_sold_items = (not_sold_row["totalNotSoldItems"] if not_sold_row else None) or 0
        return float(total_sale_amount), int(total_sold_items), int(total_not_sold_items)

    def count_in_price_bucket(self, filters: MonthFilter, bucket: PriceBucket) -> int:
        if bucket.upper_exclusive is not None:
            upper_clause, upper_bound = "price < ?", bucket.upper_exclusive
        else:
            upper_clause, upper_bound = "price <= ?", bucket.max

        row = self._client.fetch_one(
            f"SELECT COUNT(id) AS count FROM {TRANSACTIONS_TABLE} "
            f"WHERE {_MONTH_CLAUSE} AND price >= ? AND {upper_clause}",
            (filters.month, bucket.min, upper_bound),
        )
        return int((row["count"] if row else None) or 0)

    def count_by_category(self, filters: MonthFilter) -> list[tuple[str | None, int]]:
        rows = self._client.fetch_all(
            f"SELECT category, COUNT(id) AS count FROM {TRANSACTIONS_TABLE} "
            f"WHERE {_MONTH_CLAUSE} GROUP BY category ORDER BY category",
            (filters.month,),
        )
        return [(row["category"], int(row["count"])) for row in rows]
