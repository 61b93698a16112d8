"""Month filter normalization shared by filters and tests."""

from __future__ import annotations

import calendar


_MONTH_NAME_TO_NUMBER: dict[str, int] = {
    **{name.lower(): index for index, name in enumerate(calendar.month_name) if name},
    **{abbr.lower(): index for index, abbr in enumerate(calendar.month_abbr) if abbr},
}


def normalize_month(value: str | int | None) -> str | None:
    """Return a two-digit month string for recognizable inputs.

    Accepts ``1``..``12`` with or without a leading zero and English month
    names or abbreviations. Any other value is returned stripped but otherwise
    unchanged so it is bound as-is and simply matches no rows.
    """

    if value is None:
        return None
    if isinstance(value, int):
        return f"{value:02d}" if 1 <= value <= 12 else str(value)

    raw = str(value).strip()
    if raw.isdigit():
        number = int(raw)
        if 1 <= number <= 12 and len(raw) <= 2:
            return f"{number:02d}"
        return raw

    number = _MONTH_NAME_TO_NUMBER.get(raw.lower())
    if number is not None:
        return f"{number:02d}"
    return raw
