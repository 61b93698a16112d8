"""Minimal HTTP client for the remote transactions dataset."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen


@dataclass(slots=True)
class SourceSettings:
    url: str
    timeout_seconds: float = 30.0


class SourceClient:
    def __init__(self, settings: SourceSettings) -> None:
        self.settings = settings

    def fetch_records(self) -> list[dict[str, Any]]:
        """Fetch the dataset and return it as a list of JSON objects."""

        request = Request(
            url=self.settings.url,
            headers={"Accept": "application/json"},
            method="GET",
        )
        try:
            with urlopen(request, timeout=self.settings.timeout_seconds) as response:  # noqa: S310 - URL comes from trusted env config
                raw_body = response.read().decode("utf-8")
        except HTTPError as exc:
            body = exc.read().decode("utf-8", errors="replace")[:500]
            raise RuntimeError(
                f"Source request failed with status {exc.code}: {body}"
            ) from exc
        except URLError as exc:
            raise RuntimeError(f"Source request failed: {exc.reason}") from exc

        try:
            payload = json.loads(raw_body)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Source returned invalid JSON: {exc.msg}") from exc

        if not isinstance(payload, list):
            raise ValueError(f"Source returned {type(payload).__name__}, expected a JSON array")

        records = [item for item in payload if isinstance(item, dict)]
        if len(records) != len(payload):
            raise ValueError("Source array contains non-object entries")
        return records
