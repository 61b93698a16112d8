"""Pydantic contracts shared across the store, services and HTTP layer."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared.months import normalize_month


class ServiceErrorCode(str, Enum):
    """Stable error codes for service contracts across layers."""

    BACKEND_ERROR = "BACKEND_ERROR"


class ServiceError(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: ServiceErrorCode
    message: str


class _CamelModel(BaseModel):
    """Base for payloads exposed with the camelCase keys of the source dataset."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class SourceTransaction(_CamelModel):
    """One element of the remote dataset; unknown keys such as `image` are dropped."""

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    date_of_sale: str | None = None
    product_title: str | None = None
    product_description: str | None = None
    price: float | None = None
    category: str | None = None

    @field_validator("price", mode="before")
    @classmethod
    def blank_price_is_null(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("date_of_sale", "product_title", "product_description", "category", mode="before")
    @classmethod
    def coerce_text(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class Transaction(_CamelModel):
    id: int
    date_of_sale: str | None = None
    product_title: str | None = None
    product_description: str | None = None
    price: float | None = None
    category: str | None = None


# Largest value SQLite binds as an INTEGER for LIMIT and OFFSET.
MAX_SQLITE_INTEGER = 2**63 - 1


class MonthFilter(BaseModel):
    model_config = ConfigDict(extra="forbid")

    month: str | None = None

    @field_validator("month", mode="before")
    @classmethod
    def normalize_month_value(cls, value: object) -> str | None:
        if value is None:
            return None
        return normalize_month(value if isinstance(value, (str, int)) else str(value))


class TransactionFilters(MonthFilter):
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=10, ge=1)
    search: str | None = None

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value

    @property
    def offset(self) -> int:
        return min((self.page - 1) * self.per_page, MAX_SQLITE_INTEGER)


class PriceBucket(BaseModel):
    """Inclusive price bucket; `upper_exclusive` closes the gap to the next bucket."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    min: int
    max: int
    upper_exclusive: int | None = None

    @property
    def label(self) -> str:
        return f"{self.min}-{self.max}"


MAX_SAFE_INTEGER = 9007199254740991
PRICE_BUCKETS: tuple[PriceBucket, ...] = (
    PriceBucket(min=0, max=100, upper_exclusive=101),
    PriceBucket(min=101, max=200, upper_exclusive=201),
    PriceBucket(min=201, max=300, upper_exclusive=301),
    PriceBucket(min=301, max=400, upper_exclusive=401),
    PriceBucket(min=401, max=500, upper_exclusive=501),
    PriceBucket(min=501, max=600, upper_exclusive=601),
    PriceBucket(min=601, max=700, upper_exclusive=701),
    PriceBucket(min=701, max=800, upper_exclusive=801),
    PriceBucket(min=801, max=900, upper_exclusive=901),
    PriceBucket(min=901, max=MAX_SAFE_INTEGER),
)


class InitializeResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str
    inserted: int


class TransactionStatistics(_CamelModel):
    total_sale_amount: float
    total_sold_items: int
    total_not_sold_items: int


class PriceRangeCount(BaseModel):
    model_config = ConfigDict(extra="forbid")

    range: str
    count: int


class CategoryCount(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: str | None = None
    count: int


class CombinedData(_CamelModel):
    initialize_data: InitializeResult
    transactions_data: list[Transaction]
    statistics_data: TransactionStatistics
    bar_chart_data: list[PriceRangeCount]
    pie_chart_data: list[CategoryCount]
