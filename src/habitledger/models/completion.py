"""Ledger records: one per (habit, calendar day)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..dates import parse_date_key


@dataclass(frozen=True, slots=True)
class CompletionEntry:
    """Completion state of one habit on one day.

    ``completed`` is the boolean signal; ``count`` tracks progress for
    multi-count habits and is deliberately left alone by boolean toggles.
    """

    id: str
    habit_id: str
    date: str
    completed: bool
    count: int
    timestamp: datetime
    notes: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.habit_id, self.date)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "habitId": self.habit_id,
            "date": self.date,
            "completed": self.completed,
            "count": self.count,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompletionEntry":
        """Build an entry from its stored camelCase form.

        Raises KeyError/TypeError/ValueError on a malformed document.
        """
        parse_date_key(data["date"])
        count = data.get("count", 0)
        if isinstance(count, bool) or not isinstance(count, int):
            raise TypeError(f"count must be an integer, got {count!r}")
        completed = data["completed"]
        if not isinstance(completed, bool):
            raise TypeError(f"completed must be a boolean, got {completed!r}")
        return cls(
            id=str(data["id"]),
            habit_id=str(data["habitId"]),
            date=data["date"],
            completed=completed,
            count=max(0, count),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            notes=data.get("notes"),
        )
