"""Domain value objects and SQLModel table exports."""

from .completion import CompletionEntry
from .habit import (
    DEFAULT_HABITS,
    HABIT_COLORS,
    HABIT_ICONS,
    Frequency,
    Habit,
    NewHabit,
    active_habits,
    contrast_color,
    validate_habit_fields,
)
from .progress import (
    DailyProgress,
    HabitDayStatus,
    HabitRangeRate,
    HabitStats,
    HabitStreak,
    HeatmapCell,
    OverallProgress,
    WeeklyProgress,
)
from .tables import CompletionRecord, HabitRecord

__all__ = [
    "CompletionEntry",
    "CompletionRecord",
    "DailyProgress",
    "DEFAULT_HABITS",
    "Frequency",
    "HABIT_COLORS",
    "HABIT_ICONS",
    "Habit",
    "HabitDayStatus",
    "HabitRangeRate",
    "HabitRecord",
    "HabitStats",
    "HabitStreak",
    "HeatmapCell",
    "NewHabit",
    "OverallProgress",
    "WeeklyProgress",
    "active_habits",
    "contrast_color",
    "validate_habit_fields",
]
