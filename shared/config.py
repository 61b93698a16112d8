"""Configuration helpers for environment variables."""

from __future__ import annotations

import os
import logging

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


DEFAULT_PORT = 3001
DEFAULT_DATABASE_PATH = "database.db"
DEFAULT_SOURCE_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"
DEFAULT_SOURCE_TIMEOUT_SECONDS = 30.0
DEFAULT_COMBINED_DATA_MONTH = "01"


def _should_load_dotenv() -> bool:
    """Return whether local dotenv loading should run."""
    app_env = os.getenv("APP_ENV", "dev").strip().lower()
    return app_env in {"dev", "local"}


if _should_load_dotenv():
    load_dotenv()


def get_env(name: str, default: str | None = None) -> str | None:
    """Return a raw environment value or default."""
    return os.getenv(name, default)


def app_env() -> str:
    """Return the current application environment."""
    return (get_env("APP_ENV", "dev") or "dev").strip() or "dev"


def port() -> int:
    """Return the HTTP port, falling back to the default on invalid values."""
    raw_value = (get_env("PORT", "") or "").strip()
    if not raw_value:
        return DEFAULT_PORT
    try:
        value = int(raw_value)
    except ValueError:
        logger.warning("invalid_port_env value=%s default=%s", raw_value, DEFAULT_PORT)
        return DEFAULT_PORT
    if not 0 < value < 65536:
        logger.warning("invalid_port_env value=%s default=%s", raw_value, DEFAULT_PORT)
        return DEFAULT_PORT
    return value


def host() -> str:
    """Return the bind host for the HTTP server."""
    return (get_env("HOST", "0.0.0.0") or "0.0.0.0").strip() or "0.0.0.0"


def database_path() -> str:
    """Return the SQLite database file path."""
    return (get_env("DATABASE_PATH", DEFAULT_DATABASE_PATH) or DEFAULT_DATABASE_PATH).strip() or DEFAULT_DATABASE_PATH


def source_url() -> str:
    """Return the remote URL serving the transactions dataset."""
    return (get_env("SOURCE_URL", DEFAULT_SOURCE_URL) or DEFAULT_SOURCE_URL).strip() or DEFAULT_SOURCE_URL


def source_timeout_seconds() -> float:
    """Return the dataset fetch timeout with a safe default."""
    raw_value = (get_env("SOURCE_TIMEOUT_SECONDS", "") or "").strip()
    if not raw_value:
        return DEFAULT_SOURCE_TIMEOUT_SECONDS
    try:
        value = float(raw_value)
    except ValueError:
        return DEFAULT_SOURCE_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_SOURCE_TIMEOUT_SECONDS


def combined_data_month() -> str:
    """Return the month used by the combined data endpoint."""
    raw_value = get_env("COMBINED_DATA_MONTH", DEFAULT_COMBINED_DATA_MONTH) or DEFAULT_COMBINED_DATA_MONTH
    return raw_value.strip() or DEFAULT_COMBINED_DATA_MONTH


def log_level() -> str:
    """Return the root log level name."""
    return (get_env("LOG_LEVEL", "INFO") or "INFO").strip().upper() or "INFO"


def cors_allow_origins() -> list[str]:
    """Return CORS allowed origins from env with safe environment defaults."""
    raw_origins = get_env("CORS_ALLOW_ORIGINS", "") or ""
    parsed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

    if parsed_origins:
        return parsed_origins

    if app_env().strip().lower() in {"dev", "local"}:
        return ["http://localhost:3000", "http://127.0.0.1:3000"]

    ui_origin = (get_env("UI_ORIGIN", "") or "").strip()
    if ui_origin:
        return [ui_origin]

    logger.warning(
        "cors_allow_origins_empty_in_prod app_env=%s; define CORS_ALLOW_ORIGINS or UI_ORIGIN",
        app_env(),
    )

    return []
