"""
Number and date normalization shared by the extractors and totals engine.

Invoice text uses either '.' or ',' as the decimal separator and dates in
day-first or year-first order.
"""

import math
import re
from datetime import date
from typing import Any

# Day-first is tried before year-first
DATE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(\d{1,2})[.\-/](\d{1,2})[.\-/](\d{4})"),
    re.compile(r"(\d{4})[.\-/](\d{1,2})[.\-/](\d{1,2})"),
]

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_number(value: Any, default: float = 0.0) -> float:
    """
    Coerce a value to float, returning default when it is not numeric.

    Handles "1 234,56", "1.234,56", "1234.56" and plain numbers.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, int | float):
        result = float(value)
    else:
        text = str(value).strip().replace(" ", "").replace(" ", "")
        if not text:
            return default
        if "," in text and "." in text:
            # Whichever separator comes last is the decimal one
            if text.rfind(",") > text.rfind("."):
                text = text.replace(".", "").replace(",", ".")
            else:
                text = text.replace(",", "")
        else:
            text = text.replace(",", ".")
        try:
            result = float(text)
        except ValueError:
            return default

    if math.isnan(result) or math.isinf(result):
        return default
    return result


def parse_percentage(value: Any, default: int = 23) -> int:
    """VAT rate as integer percent, accepting '23', '23%' or 23.0."""
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    number = parse_number(value, float(default))
    return int(round(number))


def _build_date(groups: tuple[str, ...], year_first: bool) -> date | None:
    if year_first:
        year, month, day = groups
    else:
        day, month, year = groups
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def find_date(text: str) -> date | None:
    """
    First date-shaped token in text, as a calendar date.

    Returns None when nothing matches or the first match is not a real
    calendar day, e.g. 31.02.2024.
    """
    for pattern in DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            groups = match.groups()
            return _build_date(groups, year_first=len(groups[0]) == 4)
    return None


def normalize_date(value: Any, today: date | None = None) -> str:
    """
    Normalize a date-ish value to ISO YYYY-MM-DD.

    Falls back to today when the value is missing or invalid. An ISO date
    is returned unchanged.
    """
    fallback = (today or date.today()).isoformat()

    if isinstance(value, date):
        return value.isoformat()
    if not value or not isinstance(value, str):
        return fallback

    value = value.strip()
    if _ISO_DATE.match(value):
        try:
            return date.fromisoformat(value).isoformat()
        except ValueError:
            return fallback

    parsed = find_date(value)
    return parsed.isoformat() if parsed else fallback
