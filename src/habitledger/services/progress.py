"""Daily, weekly and per-habit progress summaries.

All functions here are pure: they read the habits and ledger they are given
and return new view models. Rates are percentages in ``[0, 100]``.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Sequence

from ..dates import as_date, date_key, days_back, week_start
from ..errors import ValidationError
from ..models.habit import Habit, active_habits
from ..models.progress import (
    DailyProgress,
    HabitDayStatus,
    HabitRangeRate,
    HabitStats,
    HeatmapCell,
    OverallProgress,
    WeeklyProgress,
)
from .ledger import CompletionLedger
from .streaks import compute_streak

COMPLETION_WINDOW_DAYS = 30
AVERAGE_WINDOW_DAYS = 84  # twelve weeks
OVERALL_RANGES = (7, 30, 90)


def _percent(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def daily_progress(
    day: str | date | datetime, habits: Sequence[Habit], ledger: CompletionLedger
) -> DailyProgress:
    """Per-habit status for one day and the share of habits completed."""

    key = date_key(as_date(day))
    day_entries = ledger.for_date(key)

    statuses = []
    for habit in habits:
        entry = day_entries.get(habit.id)
        statuses.append(
            HabitDayStatus(
                habit_id=habit.id,
                completed=entry.completed if entry else False,
                count=entry.count if entry else 0,
                target_count=habit.target_count,
            )
        )

    completed = sum(1 for s in statuses if s.completed)
    return DailyProgress(
        date=key,
        habits=tuple(statuses),
        completion_rate=_percent(completed, len(habits)),
    )


def weekly_progress(
    start: str | date | datetime, habits: Sequence[Habit], ledger: CompletionLedger
) -> WeeklyProgress:
    """Seven days beginning at ``start``.

    ``start`` is used as given; callers that want calendar weeks should pass
    ``week_start(day)``.
    """

    first = as_date(start)
    days = tuple(
        daily_progress(first + timedelta(days=offset), habits, ledger) for offset in range(7)
    )
    completed = sum(day.completed_count for day in days)
    return WeeklyProgress(
        week_start_date=date_key(first),
        days=days,
        total_habits=len(habits),
        completed_habits=completed,
        completion_rate=_percent(completed, len(habits) * 7),
    )


def _week_label(weeks_ago: int) -> str:
    if weeks_ago == 0:
        return "This week"
    if weeks_ago == 1:
        return "Last week"
    return f"{weeks_ago} weeks ago"


def recent_weeks(
    habits: Sequence[Habit],
    ledger: CompletionLedger,
    *,
    weeks: int = 4,
    today: date | None = None,
    week_starts_on: int = 0,
) -> list[WeeklyProgress]:
    """Weekly progress for the last ``weeks`` calendar weeks, oldest first."""

    today = today or date.today()
    current = week_start(today, week_starts_on)
    result = []
    for weeks_ago in range(weeks - 1, -1, -1):
        summary = weekly_progress(current - timedelta(weeks=weeks_ago), habits, ledger)
        result.append(
            WeeklyProgress(
                week_start_date=summary.week_start_date,
                days=summary.days,
                total_habits=summary.total_habits,
                completed_habits=summary.completed_habits,
                completion_rate=summary.completion_rate,
                label=_week_label(weeks_ago),
            )
        )
    return result


def heatmap(
    habits: Sequence[Habit],
    ledger: CompletionLedger,
    *,
    days: int,
    today: date | None = None,
) -> list[HeatmapCell]:
    """Completion rate of the active habits for each of the trailing ``days`` days."""

    today = today or date.today()
    active = active_habits(habits)
    active_ids = {habit.id for habit in active}
    cells = []
    for day in days_back(today, days):
        key = date_key(day)
        done = sum(
            1
            for habit_id, entry in ledger.for_date(key).items()
            if habit_id in active_ids and entry.completed
        )
        cells.append(HeatmapCell(date=key, completion_rate=_percent(done, len(active))))
    return cells


def overall_progress(
    habits: Sequence[Habit],
    ledger: CompletionLedger,
    days: int,
    today: date | None = None,
) -> OverallProgress:
    """Completed entries of the active habits over the trailing ``days`` days.

    The overall rate is completions divided by ``active habits x days``; each
    habit also gets its own rate over the same range.
    """

    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise ValidationError(f"days must be a positive integer, got {days!r}")

    today = today or date.today()
    start = date_key(today - timedelta(days=days - 1))
    end = date_key(today)

    rates = []
    for habit in active_habits(habits):
        done = sum(
            1
            for entry in ledger.for_habit(habit.id)
            if entry.completed and start <= entry.date <= end
        )
        rates.append(
            HabitRangeRate(habit_id=habit.id, completed=done, completion_rate=_percent(done, days))
        )

    completed = sum(rate.completed for rate in rates)
    possible = len(rates) * days
    return OverallProgress(
        start_date=start,
        end_date=end,
        days=days,
        active_habits=len(rates),
        completed=completed,
        possible=possible,
        completion_rate=_percent(completed, possible),
        habits=tuple(rates),
    )


def habit_stats(
    habit: Habit,
    ledger: CompletionLedger,
    window_days: int = COMPLETION_WINDOW_DAYS,
    *,
    today: date | None = None,
    average_window_days: int = AVERAGE_WINDOW_DAYS,
) -> HabitStats:
    """Totals, trailing completion rate, weekly average and streaks for one habit.

    ``completion_rate`` counts completed entries among the last
    ``window_days`` days (today included). ``average_per_week`` counts every
    entry touched in the trailing ``average_window_days`` window, completed
    or not, divided by the number of weeks in that window.
    """

    today = today or date.today()
    entries = ledger.for_habit(habit.id)
    total = sum(entry.count for entry in entries)

    window_start = date_key(today - timedelta(days=window_days - 1))
    average_start = date_key(today - timedelta(days=average_window_days - 1))
    end = date_key(today)

    # Date keys sort lexicographically in calendar order.
    recent_completed = sum(
        1 for entry in entries if entry.completed and window_start <= entry.date <= end
    )
    in_average_window = sum(1 for entry in entries if average_start <= entry.date <= end)
    weeks = average_window_days / 7

    return HabitStats(
        habit_id=habit.id,
        total_completions=total,
        completion_rate=_percent(recent_completed, window_days),
        average_per_week=in_average_window / weeks if weeks > 0 else 0.0,
        streak=compute_streak(ledger, habit.id, today=today),
    )


__all__ = [
    "AVERAGE_WINDOW_DAYS",
    "COMPLETION_WINDOW_DAYS",
    "OVERALL_RANGES",
    "daily_progress",
    "habit_stats",
    "heatmap",
    "overall_progress",
    "recent_weeks",
    "weekly_progress",
]
