"""Derived, read-only view models computed from a ledger snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class HabitStreak:
    habit_id: str
    current_streak: int
    longest_streak: int
    last_completed_date: Optional[str] = None


@dataclass(frozen=True, slots=True)
class HabitStats:
    habit_id: str
    total_completions: int
    completion_rate: float
    average_per_week: float
    streak: HabitStreak


@dataclass(frozen=True, slots=True)
class HabitDayStatus:
    """One habit's state on one day."""

    habit_id: str
    completed: bool
    count: int
    target_count: int = 1

    @property
    def is_done(self) -> bool:
        """Semantic completion: full target reached for multi-count habits."""

        if self.target_count > 1:
            return self.count >= self.target_count
        return self.completed

    @property
    def progress(self) -> float:
        """Percent towards the target, capped at 100."""

        if self.target_count > 1:
            return min(self.count / self.target_count, 1.0) * 100
        return 100.0 if self.completed else 0.0


@dataclass(frozen=True, slots=True)
class DailyProgress:
    date: str
    habits: tuple[HabitDayStatus, ...]
    completion_rate: float

    @property
    def completed_count(self) -> int:
        return sum(1 for status in self.habits if status.completed)


@dataclass(frozen=True, slots=True)
class WeeklyProgress:
    week_start_date: str
    days: tuple[DailyProgress, ...]
    total_habits: int
    completed_habits: int
    completion_rate: float
    label: Optional[str] = None


@dataclass(frozen=True, slots=True)
class HeatmapCell:
    date: str
    completion_rate: float


@dataclass(frozen=True, slots=True)
class HabitRangeRate:
    habit_id: str
    completed: int
    completion_rate: float


@dataclass(frozen=True, slots=True)
class OverallProgress:
    """Completion across the active habits over a trailing range of days."""

    start_date: str
    end_date: str
    days: int
    active_habits: int
    completed: int
    possible: int
    completion_rate: float
    habits: tuple[HabitRangeRate, ...] = ()
