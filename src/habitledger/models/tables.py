"""SQLModel tables backing the database store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .completion import CompletionEntry
from .habit import Frequency, Habit


def _utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes; everything written is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class HabitRecord(SQLModel, table=True):
    """Persisted row for a ``Habit``."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(primary_key=True, max_length=64)
    position: int = Field(default=0, nullable=False, index=True)
    name: str = Field(nullable=False, max_length=120)
    description: Optional[str] = Field(default=None, max_length=255)
    color: str = Field(default="#3B82F6", max_length=16)
    icon: str = Field(default="✅", max_length=32)
    frequency: str = Field(default=Frequency.DAILY.value, max_length=16)
    target_count: int = Field(default=1, nullable=False)
    is_active: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(nullable=False)
    updated_at: datetime = Field(nullable=False)

    @classmethod
    def from_habit(cls, habit: Habit, *, position: int) -> "HabitRecord":
        return cls(
            id=habit.id,
            position=position,
            name=habit.name,
            description=habit.description,
            color=habit.color,
            icon=habit.icon,
            frequency=habit.frequency.value,
            target_count=habit.target_count,
            is_active=habit.is_active,
            created_at=habit.created_at,
            updated_at=habit.updated_at,
        )

    def to_habit(self) -> Habit:
        return Habit(
            id=self.id,
            name=self.name,
            description=self.description,
            color=self.color,
            icon=self.icon,
            frequency=Frequency(self.frequency),
            target_count=self.target_count,
            is_active=self.is_active,
            created_at=_utc(self.created_at),
            updated_at=_utc(self.updated_at),
        )


class CompletionRecord(SQLModel, table=True):
    """Persisted row for a ``CompletionEntry``; unique per (habit_id, date)."""

    __tablename__: ClassVar[str] = "habit_completion"
    __table_args__ = (UniqueConstraint("habit_id", "date", name="uq_completion_habit_date"),)

    id: str = Field(primary_key=True, max_length=64)
    position: int = Field(default=0, nullable=False)
    habit_id: str = Field(foreign_key="habit.id", nullable=False, index=True, max_length=64)
    date: str = Field(nullable=False, index=True, max_length=10)
    completed: bool = Field(default=False, nullable=False)
    count: int = Field(default=0, nullable=False)
    timestamp: datetime = Field(nullable=False)
    notes: Optional[str] = Field(default=None, max_length=500)

    @classmethod
    def from_entry(cls, entry: CompletionEntry, *, position: int) -> "CompletionRecord":
        return cls(
            id=entry.id,
            position=position,
            habit_id=entry.habit_id,
            date=entry.date,
            completed=entry.completed,
            count=entry.count,
            timestamp=entry.timestamp,
            notes=entry.notes,
        )

    def to_entry(self) -> CompletionEntry:
        return CompletionEntry(
            id=self.id,
            habit_id=self.habit_id,
            date=self.date,
            completed=self.completed,
            count=max(0, self.count),
            timestamp=_utc(self.timestamp),
            notes=self.notes,
        )
