"""
Date normalization.

Parses the heterogeneous date text found in resumes into naive ``datetime``
values that can be compared and subtracted.

Supported forms, in priority order:
1. None, "", "   "                 -> now
2. "present" / "now" / "current"   -> now (case-insensitive)
3. "Mar 2015", "March 2015"        -> 2015-03-01
4. "2015-03", "1998-4"             -> first of that month
5. "2015"                          -> 2015-01-01
6. Anything datetime can parse     -> ISO 8601 or a few common layouts

"Now" honors the VITAE_NOW environment variable, read on every call so that a
single process can pin the clock for reproducible builds.
"""

import calendar
import os
import re
from datetime import date, datetime
from typing import Any, Optional

from vitae.utils.exceptions import InvalidDateFormat

NOW_ENV_VAR = "VITAE_NOW"

# Month name -> 1-based index
MONTHS = {name.lower(): idx for idx, name in enumerate(calendar.month_name) if name}
MONTH_ABBREVIATIONS = {name.lower(): idx for idx, name in enumerate(calendar.month_abbr) if name}
MONTH_ABBREVIATIONS["sept"] = 9


class DatePatterns:
    PRESENT = re.compile(r"^(present|now|current)$", re.IGNORECASE)
    MONTH_YEAR = re.compile(r"^\D+\s+\d{4}$")
    YEAR_MONTH = re.compile(r"^\d{4}-\d{1,2}$")
    YEAR_ONLY = re.compile(r"^\d{4}$")


# Layouts tried after ISO 8601 parsing fails
FALLBACK_LAYOUTS = ["%B %d, %Y", "%b %d, %Y", "%m/%d/%Y", "%d %B %Y", "%d %b %Y"]


def get_now() -> datetime:
    """Current time, or the VITAE_NOW override when set."""
    override = os.getenv(NOW_ENV_VAR)
    if override and override.strip():
        parsed = _parse_text(override.strip().lower())
        if parsed is None:
            raise InvalidDateFormat(override)
        return parsed
    return datetime.now()


def is_current(value: Any) -> bool:
    """Whether a date value refers to the present (absent or a sentinel word)."""
    if value is None:
        return True
    if isinstance(value, str):
        stripped = value.strip()
        return not stripped or bool(DatePatterns.PRESENT.match(stripped))
    return False


def _parse_month_year(text: str) -> Optional[datetime]:
    parts = text.split()
    if len(parts) != 2:
        return None
    month_name, year = parts
    month = MONTHS.get(month_name) or MONTH_ABBREVIATIONS.get(month_name.rstrip("."))
    if not month:
        return None
    return datetime.strptime(f"{year}-{month:02d}", "%Y-%m")


def _parse_text(text: str) -> Optional[datetime]:
    """Parse already-trimmed, lowercased, non-sentinel text. None when unparseable."""
    try:
        if DatePatterns.MONTH_YEAR.match(text):
            result = _parse_month_year(text)
            if result is not None:
                return result

        if DatePatterns.YEAR_MONTH.match(text):
            year, month = text.split("-")
            return datetime(int(year), int(month), 1)

        if DatePatterns.YEAR_ONLY.match(text):
            return datetime(int(text), 1, 1)
    except ValueError:
        # e.g. "2015-13": matches the shape but is not a real month
        return None

    try:
        parsed = datetime.fromisoformat(text.upper())
        return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed
    except ValueError:
        pass

    for layout in FALLBACK_LAYOUTS:
        try:
            return datetime.strptime(text, layout)
        except ValueError:
            continue

    return None


def parse_date(value: Any, throws: bool = True) -> Optional[datetime]:
    """
    Normalize a date value to a naive datetime.

    Args:
        value: Date text, a date/datetime, or None
        throws: If False, return None instead of raising on unparseable input

    Returns:
        Parsed datetime (None only when throws=False and parsing failed)

    Raises:
        InvalidDateFormat: If the value cannot be parsed and throws is True

    Examples:
        >>> parse_date("Mar 2015")
        datetime.datetime(2015, 3, 1, 0, 0)
        >>> parse_date("2015-4")
        datetime.datetime(2015, 4, 1, 0, 0)
    """
    if value is None:
        return get_now()

    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    # Bare years sometimes arrive as JSON numbers
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)

    if isinstance(value, str):
        trimmed = value.strip().lower()
        if not trimmed or DatePatterns.PRESENT.match(trimmed):
            return get_now()

        result = _parse_text(trimmed)
        if result is not None:
            return result

    if throws:
        raise InvalidDateFormat(value)
    return None
