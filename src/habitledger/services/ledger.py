"""Completion ledger: a copy-on-write mapping of (habit_id, date) to entries.

Every write returns a new ``CompletionLedger``; existing instances are never
modified, so any reader holding a ledger sees a consistent snapshot.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, Iterator, Optional

from ..models.completion import CompletionEntry

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class CompletionLedger:
    """Immutable collection of completion entries keyed by (habit_id, date)."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[CompletionEntry] = ()):
        by_key: dict[tuple[str, str], CompletionEntry] = {}
        for entry in entries:
            # Later duplicates win; the stored form should never carry any.
            by_key[entry.key] = entry
        self._entries = by_key

    @classmethod
    def _from_mapping(cls, mapping: dict[tuple[str, str], CompletionEntry]) -> "CompletionLedger":
        ledger = cls.__new__(cls)
        ledger._entries = mapping
        return ledger

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CompletionEntry]:
        return iter(self._entries.values())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompletionLedger):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"CompletionLedger({len(self._entries)} entries)"

    def get(self, habit_id: str, date: str) -> Optional[CompletionEntry]:
        return self._entries.get((habit_id, date))

    def entries(self) -> list[CompletionEntry]:
        return list(self._entries.values())

    def for_habit(self, habit_id: str) -> list[CompletionEntry]:
        return [entry for entry in self._entries.values() if entry.habit_id == habit_id]

    def for_date(self, date: str) -> dict[str, CompletionEntry]:
        """Entries on ``date`` keyed by habit id."""

        return {
            entry.habit_id: entry for entry in self._entries.values() if entry.date == date
        }

    def habit_ids(self) -> set[str]:
        return {entry.habit_id for entry in self._entries.values()}

    # Writes ------------------------------------------------------------
    def _with(self, entry: CompletionEntry) -> "CompletionLedger":
        mapping = dict(self._entries)
        mapping[entry.key] = entry
        return self._from_mapping(mapping)

    def upsert_toggle(
        self, habit_id: str, date: str, *, clock: Clock = utc_now
    ) -> "CompletionLedger":
        """Flip ``completed`` for the day, creating a completed entry with count 1 if absent.

        An existing entry keeps its ``count``; only the boolean and the
        timestamp change.
        """
        existing = self.get(habit_id, date)
        now = clock()
        if existing is None:
            entry = CompletionEntry(
                id=new_id(),
                habit_id=habit_id,
                date=date,
                completed=True,
                count=1,
                timestamp=now,
            )
        else:
            entry = CompletionEntry(
                id=existing.id,
                habit_id=habit_id,
                date=date,
                completed=not existing.completed,
                count=existing.count,
                timestamp=now,
                notes=existing.notes,
            )
        return self._with(entry)

    def upsert_count(
        self, habit_id: str, date: str, new_count: int, *, clock: Clock = utc_now
    ) -> "CompletionLedger":
        """Set the day's count (clamped at zero); ``completed`` follows ``count > 0``.

        A zero count on a day that was never touched is a no-op and returns
        ``self``. A zero count on an existing entry keeps the record with
        ``count=0, completed=False``.
        """
        count = max(0, new_count)
        existing = self.get(habit_id, date)
        if existing is None and count == 0:
            return self

        entry = CompletionEntry(
            id=existing.id if existing else new_id(),
            habit_id=habit_id,
            date=date,
            completed=count > 0,
            count=count,
            timestamp=clock(),
            notes=existing.notes if existing else None,
        )
        return self._with(entry)

    def set_notes(
        self, habit_id: str, date: str, notes: Optional[str], *, clock: Clock = utc_now
    ) -> "CompletionLedger":
        """Attach notes to an existing entry. Returns ``self`` when there is none."""

        existing = self.get(habit_id, date)
        if existing is None:
            return self
        entry = CompletionEntry(
            id=existing.id,
            habit_id=habit_id,
            date=date,
            completed=existing.completed,
            count=existing.count,
            timestamp=clock(),
            notes=notes,
        )
        return self._with(entry)

    def remove_by_habit(self, habit_id: str) -> "CompletionLedger":
        """Drop every entry for ``habit_id``; a no-op when none exist."""

        if habit_id not in self.habit_ids():
            return self
        return self._from_mapping(
            {key: entry for key, entry in self._entries.items() if key[0] != habit_id}
        )


__all__ = ["Clock", "CompletionLedger", "new_id", "utc_now"]
