"""Calendar-day keys and week helpers.

Every lookup in the ledger goes through ``date_key``. Keys are naive local
calendar days formatted ``YYYY-MM-DD``; no timezone conversion is ever
applied, so two instants on the same local day always share a key.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from .errors import ValidationError

DATE_KEY_FORMAT = "%Y-%m-%d"
_DATE_KEY_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


def date_key(day: date | datetime) -> str:
    """Return the canonical ``YYYY-MM-DD`` key for a calendar day or instant."""

    if isinstance(day, datetime):
        day = day.date()
    return day.strftime(DATE_KEY_FORMAT)


def today_key() -> str:
    """Key for the current local day, evaluated on every call."""

    return date_key(date.today())


def parse_date_key(key: str) -> date:
    """Parse a canonical key back to a ``date``.

    Raises:
        ValidationError: if ``key`` is not a real ``YYYY-MM-DD`` calendar day.
    """
    if not isinstance(key, str) or not _DATE_KEY_RE.match(key):
        raise ValidationError(f"Invalid date key {key!r}; expected YYYY-MM-DD")
    try:
        return datetime.strptime(key, DATE_KEY_FORMAT).date()
    except ValueError as exc:
        raise ValidationError(f"Invalid date key {key!r}: {exc}") from exc


def ensure_date_key(value: str | date | datetime | None) -> str:
    """Normalise a caller supplied day (or ``None`` for today) to a validated key."""

    if value is None:
        return today_key()
    if isinstance(value, (date, datetime)):
        return date_key(value)
    return date_key(parse_date_key(value))


def as_date(value: str | date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date_key(value)


def week_start(day: date | datetime, week_starts_on: int = 0) -> date:
    """First day of the week containing ``day`` (0 = Monday ... 6 = Sunday)."""

    day = as_date(day)
    offset = (day.weekday() - week_starts_on) % 7
    return day - timedelta(days=offset)


def week_dates(day: date | datetime, week_starts_on: int = 0) -> list[date]:
    """The seven days of the week containing ``day``."""

    start = week_start(day, week_starts_on)
    return [start + timedelta(days=i) for i in range(7)]


def days_back(end: date, days: int) -> list[date]:
    """``days`` consecutive dates ending on ``end`` inclusive, oldest first."""

    return [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


__all__ = [
    "DATE_KEY_FORMAT",
    "as_date",
    "date_key",
    "days_back",
    "ensure_date_key",
    "parse_date_key",
    "today_key",
    "week_dates",
    "week_start",
]
