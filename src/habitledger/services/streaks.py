"""Streak calculations over a ledger snapshot."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from ..dates import date_key, parse_date_key
from ..models.completion import CompletionEntry
from ..models.progress import HabitStreak
from .ledger import CompletionLedger


def completed_days(entries: Iterable[CompletionEntry]) -> set[date]:
    return {parse_date_key(e.date) for e in entries if e.completed}


def current_streak(days: set[date], *, today: date) -> int:
    """Consecutive completed days ending today, or ending yesterday when today is not logged yet."""

    cursor = today if today in days else today - timedelta(days=1)
    current = 0
    while cursor in days:
        current += 1
        cursor -= timedelta(days=1)
    return current


def longest_streak(days: Iterable[date]) -> int:
    longest = 0
    run = 0
    last_day: date | None = None
    for d in sorted(days):
        if last_day is not None and d == last_day + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = d
    return longest


def compute_streak(
    ledger: CompletionLedger, habit_id: str, *, today: date | None = None
) -> HabitStreak:
    """Return current/longest streak and last completed day for ``habit_id``.

    Only entries with ``completed`` set count. An empty history yields zeros.
    """

    days = completed_days(ledger.for_habit(habit_id))
    if not days:
        return HabitStreak(habit_id=habit_id, current_streak=0, longest_streak=0)

    today = today or date.today()
    return HabitStreak(
        habit_id=habit_id,
        current_streak=current_streak(days, today=today),
        longest_streak=longest_streak(days),
        last_completed_date=date_key(max(days)),
    )


__all__ = ["completed_days", "compute_streak", "current_streak", "longest_streak"]
