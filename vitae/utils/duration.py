"""
Duration inspection.

Computes the elapsed time covered by a dated collection (e.g. work history).
The span runs from the earliest date found to the latest one; gaps and
overlaps between entries are not accounted for.
"""

from datetime import datetime
from typing import Any, List, Mapping

from vitae.utils.dates import parse_date

UNITS = ("years", "months", "weeks", "days")


def _lookup(data: Any, path: str) -> Any:
    """Resolve a dotted key path ("basics.work") against nested mappings."""
    current = data
    for key in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(key)
        else:
            current = getattr(current, key, None)
        if current is None:
            return None
    return current


def _has_value(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def _entry_dates(entry: Any, start_key: str, end_key: str) -> List[datetime]:
    """
    Normalized dates for one entry.

    Entries with neither a start nor an end contribute nothing. A missing end
    on a started entry means the entry is ongoing.
    """
    if not isinstance(entry, Mapping):
        return []

    start = entry.get(start_key)
    end = entry.get(end_key)
    if not _has_value(start) and not _has_value(end):
        return []

    if not _has_value(end):
        end = "current"

    dates = [parse_date(end)]
    if start_key in entry:
        dates.insert(0, parse_date(start))
    return dates


def diff(later: datetime, earlier: datetime, unit: str = "years") -> int:
    """
    Whole calendar units between two dates, truncated toward zero.

    Args:
        later: End of the interval
        earlier: Start of the interval
        unit: One of "years", "months", "weeks", "days"

    Returns:
        Number of complete units
    """
    unit = unit if unit.endswith("s") else f"{unit}s"
    if unit not in UNITS:
        raise ValueError(f"Unsupported duration unit '{unit}'. Valid units: {UNITS}")

    if unit in ("days", "weeks"):
        days = int((later - earlier).total_seconds() // 86400)
        return days if unit == "days" else int(days / 7)

    sign = 1
    if later < earlier:
        later, earlier = earlier, later
        sign = -1

    months = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    # Incomplete final month
    if (later.day, later.time()) < (earlier.day, earlier.time()):
        months -= 1

    return sign * (months if unit == "months" else months // 12)


def run(
    resume: Any,
    collection_key: str = "work",
    start_key: str = "startDate",
    end_key: str = "endDate",
    unit: str = "years",
) -> int:
    """
    Compute the duration spanned by a dated collection.

    Args:
        resume: Resume mapping (or object exposing the collection attribute)
        collection_key: Dotted path to the collection (e.g., "work")
        start_key: Key of each entry's start date
        end_key: Key of each entry's end date
        unit: Result unit ("years", "months", "weeks", "days")

    Returns:
        Elapsed units from the earliest to the latest date, 0 if none

    Example:
        >>> run({"work": [{"startDate": "2010-01-01", "endDate": "2015-01-01"}]})
        5
    """
    history = _lookup(resume, collection_key)
    if not history or not isinstance(history, list):
        return 0

    dates: List[datetime] = []
    for entry in history:
        dates.extend(_entry_dates(entry, start_key, end_key))

    if not dates:
        return 0

    return diff(max(dates), min(dates), unit)
