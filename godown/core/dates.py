"""Date normalisation for spreadsheet and work-entry timestamps."""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

TWO_DIGIT_YEAR_PIVOT = 50


def _expand_year(year: int) -> int:
    if year < TWO_DIGIT_YEAR_PIVOT:
        return 2000 + year
    if year < 100:
        return 1900 + year
    return year


def _naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _is_slash_date(token: str) -> bool:
    parts = token.split("/")
    return len(parts) == 3 and all(part.isdigit() for part in parts)


def _parse_slash_date(token: str) -> datetime | None:
    parts = token.split("/")
    month, day, year = (int(part) for part in parts)
    try:
        return datetime(_expand_year(year), month, day)
    except ValueError:
        return None


def normalize_date(value: Any) -> datetime | None:
    """Return a naive ``datetime`` for ``value`` or ``None`` when unparseable.

    Only the first whitespace separated token is considered, so combined
    ``"1/5/24 10:32:00"`` style values lose their time of day.  Slash dates
    are read as ``month/day/year``; anything else goes through pandas.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return _naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)

    text = str(value).strip()
    if not text:
        return None
    token = text.split()[0]

    if _is_slash_date(token):
        parsed = _parse_slash_date(token)
        if parsed is None:
            logger.debug("Invalid month/day/year date: %s", value)
        return parsed

    try:
        timestamp = pd.to_datetime(token, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        timestamp = pd.NaT
    if pd.isna(timestamp):
        logger.debug("Could not parse date value: %s", value)
        return None
    return _naive(timestamp.to_pydatetime())


def day_key(value: datetime | date) -> str:
    """ISO calendar-day key used for bucketing."""

    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def end_of_day(value: date) -> datetime:
    return datetime.combine(value, time(23, 59, 59, 999000))


__all__ = ["day_key", "end_of_day", "normalize_date", "start_of_day"]
