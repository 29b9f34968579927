"""Habit registry and completion ledger state machine.

``HabitTracker`` owns the only mutable reference to the current
``HabitState``. Every action builds a new immutable state, persists it via
the store and only then publishes it, so readers always see either the
state before an action or the state after it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Callable, Optional, Sequence

from ..dates import date_key, ensure_date_key
from ..domain.repositories.habit import HabitStore
from ..errors import InvalidStateError, NotFoundError, PersistenceError, ValidationError
from ..logging_config import get_logger
from ..models.completion import CompletionEntry
from ..models.habit import DEFAULT_HABITS, Frequency, Habit, NewHabit, validate_habit_fields
from ..models.progress import (
    DailyProgress,
    HabitStats,
    HabitStreak,
    OverallProgress,
    WeeklyProgress,
)
from . import progress, streaks
from .ledger import Clock, CompletionLedger, new_id, utc_now

logger = get_logger(__name__)


class TrackerStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True, slots=True)
class HabitState:
    """Snapshot of the registry and ledger."""

    habits: tuple[Habit, ...] = ()
    ledger: CompletionLedger = field(default_factory=CompletionLedger)
    status: TrackerStatus = TrackerStatus.LOADING

    @property
    def is_loading(self) -> bool:
        return self.status is TrackerStatus.LOADING

    def find_habit(self, habit_id: str) -> Optional[Habit]:
        for habit in self.habits:
            if habit.id == habit_id:
                return habit
        return None


def _coerce_frequency(value: Frequency | str) -> Frequency:
    try:
        return Frequency(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown frequency {value!r}") from exc


class HabitTracker:
    """Applies named actions to the habit registry and completion ledger.

    Args:
        store: storage collaborator the state is loaded from and saved to.
        clock: source of "now" for timestamps.
        today: source of the current local day for default date keys.
        completion_window_days: trailing window for ``stats`` completion rates.
        average_window_days: trailing window for ``stats`` weekly averages.
    """

    def __init__(
        self,
        store: HabitStore,
        *,
        clock: Clock = utc_now,
        today: Callable[[], date] = date.today,
        completion_window_days: int = progress.COMPLETION_WINDOW_DAYS,
        average_window_days: int = progress.AVERAGE_WINDOW_DAYS,
    ):
        self._store = store
        self._clock = clock
        self._today = today
        self.completion_window_days = completion_window_days
        self.average_window_days = average_window_days
        self._state = HabitState()

    @property
    def state(self) -> HabitState:
        return self._state

    @property
    def habits(self) -> tuple[Habit, ...]:
        return self._state.habits

    @property
    def ledger(self) -> CompletionLedger:
        return self._state.ledger

    # Lifecycle ---------------------------------------------------------
    def load(self) -> HabitState:
        """Read persisted state and move from ``loading`` to ``ready``. Allowed once."""

        if not self._state.is_loading:
            raise InvalidStateError("Tracker state has already been loaded")

        habits = tuple(self._store.load_habits())
        known = {habit.id for habit in habits}
        entries = self._store.load_completions()
        orphans = [entry for entry in entries if entry.habit_id not in known]
        if orphans:
            logger.warning(
                "Dropping completions for unknown habits",
                extra={"orphaned": len(orphans)},
            )
        ledger = CompletionLedger(entry for entry in entries if entry.habit_id in known)

        self._state = HabitState(habits=habits, ledger=ledger, status=TrackerStatus.READY)
        logger.info(
            "Habit state loaded",
            extra={"habits": len(habits), "completions": len(ledger)},
        )
        return self._state

    def _require_ready(self) -> HabitState:
        if self._state.is_loading:
            raise InvalidStateError("Habit state is still loading")
        return self._state

    def _require_habit(self, state: HabitState, habit_id: str) -> Habit:
        habit = state.find_habit(habit_id)
        if habit is None:
            logger.warning("Unknown habit", extra={"habit_id": habit_id})
            raise NotFoundError(f"Habit {habit_id!r} not found")
        return habit

    def _default_day(self, day: str | date | None) -> str:
        if day is None:
            return date_key(self._today())
        return ensure_date_key(day)

    # Persistence -------------------------------------------------------
    def _commit(self, new_state: HabitState, *, habits: bool = False, completions: bool = False) -> None:
        """Persist the changed collections, then publish ``new_state``.

        Completions are written before habits so a cascade delete never
        leaves stored entries pointing at a removed habit. If the second
        write fails the first is reverted before ``PersistenceError`` is raised.
        """

        old_state = self._state
        written: list[str] = []
        try:
            if completions:
                self._store.save_completions(new_state.ledger.entries())
                written.append("completions")
            if habits:
                self._store.save_habits(list(new_state.habits))
                written.append("habits")
        except Exception as exc:
            logger.exception("Failed to persist habit state", extra={"written": written})
            self._revert(old_state, written)
            raise PersistenceError(f"Could not save habit data: {exc}") from exc

        self._state = new_state

    def _revert(self, old_state: HabitState, written: Sequence[str]) -> None:
        try:
            if "completions" in written:
                self._store.save_completions(old_state.ledger.entries())
            if "habits" in written:
                self._store.save_habits(list(old_state.habits))
        except Exception:
            logger.exception("Failed to restore previously saved habit state")

    # Registry actions --------------------------------------------------
    def _build_habit(self, data: NewHabit) -> Habit:
        validate_habit_fields(data.name, data.target_count)
        now = self._clock()
        return Habit(
            id=new_id(),
            name=data.name.strip(),
            description=data.description,
            color=data.color,
            icon=data.icon,
            frequency=_coerce_frequency(data.frequency),
            target_count=data.target_count,
            is_active=data.is_active,
            created_at=now,
            updated_at=now,
        )

    def add_habit(self, data: NewHabit) -> Habit:
        """Validate, assign id and timestamps, append and persist."""

        state = self._require_ready()
        habit = self._build_habit(data)
        self._commit(replace(state, habits=state.habits + (habit,)), habits=True)
        logger.info("Habit added", extra={"habit_id": habit.id, "habit_name": habit.name})
        return habit

    def update_habit(self, habit: Habit) -> Habit:
        """Replace the stored habit with the same id and refresh ``updated_at``."""

        state = self._require_ready()
        validate_habit_fields(habit.name, habit.target_count)
        existing = self._require_habit(state, habit.id)
        updated = replace(
            habit,
            name=habit.name.strip(),
            frequency=_coerce_frequency(habit.frequency),
            created_at=existing.created_at,
            updated_at=self._clock(),
        )
        habits = tuple(updated if h.id == habit.id else h for h in state.habits)
        self._commit(replace(state, habits=habits), habits=True)
        logger.info("Habit updated", extra={"habit_id": habit.id})
        return updated

    def delete_habit(self, habit_id: str) -> None:
        """Remove the habit and every ledger entry that references it."""

        state = self._require_ready()
        self._require_habit(state, habit_id)
        new_state = replace(
            state,
            habits=tuple(h for h in state.habits if h.id != habit_id),
            ledger=state.ledger.remove_by_habit(habit_id),
        )
        self._commit(new_state, habits=True, completions=True)
        logger.info(
            "Habit deleted",
            extra={"habit_id": habit_id, "removed_entries": len(state.ledger) - len(new_state.ledger)},
        )

    def initialize_default_habits(self) -> list[Habit]:
        """Append the starter habit set. Does not check for existing habits."""

        state = self._require_ready()
        created = [self._build_habit(data) for data in DEFAULT_HABITS]
        self._commit(replace(state, habits=state.habits + tuple(created)), habits=True)
        logger.info("Default habits seeded", extra={"count": len(created)})
        return created

    # Ledger actions ----------------------------------------------------
    def _apply_ledger(self, state: HabitState, ledger: CompletionLedger) -> None:
        if ledger is state.ledger:
            return
        self._commit(replace(state, ledger=ledger), completions=True)

    def toggle_habit(self, habit_id: str, day: str | date | None = None) -> CompletionEntry:
        """Flip the day's completion for ``habit_id`` (defaults to today)."""

        state = self._require_ready()
        key = self._default_day(day)
        self._require_habit(state, habit_id)
        ledger = state.ledger.upsert_toggle(habit_id, key, clock=self._clock)
        self._apply_ledger(state, ledger)
        entry = ledger.get(habit_id, key)
        logger.info(
            "Habit toggled",
            extra={"habit_id": habit_id, "date": key, "completed": entry.completed},
        )
        return entry

    def update_habit_count(
        self, habit_id: str, count: int, day: str | date | None = None
    ) -> Optional[CompletionEntry]:
        """Set the day's count for ``habit_id``; negative counts become zero.

        Returns the entry, or ``None`` when a zero count was set on a day
        that has no entry.
        """

        if isinstance(count, bool) or not isinstance(count, int):
            raise ValidationError(f"count must be an integer, got {count!r}")
        state = self._require_ready()
        key = self._default_day(day)
        self._require_habit(state, habit_id)
        ledger = state.ledger.upsert_count(habit_id, key, count, clock=self._clock)
        self._apply_ledger(state, ledger)
        logger.info(
            "Habit count updated",
            extra={"habit_id": habit_id, "date": key, "count": max(0, count)},
        )
        return ledger.get(habit_id, key)

    def set_notes(
        self, habit_id: str, notes: Optional[str], day: str | date | None = None
    ) -> Optional[CompletionEntry]:
        """Attach notes to an existing entry; returns ``None`` if the day has no entry."""

        state = self._require_ready()
        key = self._default_day(day)
        self._require_habit(state, habit_id)
        ledger = state.ledger.set_notes(habit_id, key, notes, clock=self._clock)
        self._apply_ledger(state, ledger)
        return ledger.get(habit_id, key)

    # Reads -------------------------------------------------------------
    def streak(self, habit_id: str) -> HabitStreak:
        return streaks.compute_streak(self._state.ledger, habit_id, today=self._today())

    def stats(self, habit_id: str, window_days: Optional[int] = None) -> HabitStats:
        habit = self._require_habit(self._state, habit_id)
        return progress.habit_stats(
            habit,
            self._state.ledger,
            self.completion_window_days if window_days is None else window_days,
            today=self._today(),
            average_window_days=self.average_window_days,
        )

    def daily_progress(self, day: str | date | None = None) -> DailyProgress:
        return progress.daily_progress(self._default_day(day), self._state.habits, self._state.ledger)

    def weekly_progress(self, start: str | date) -> WeeklyProgress:
        return progress.weekly_progress(ensure_date_key(start), self._state.habits, self._state.ledger)

    def overall_progress(self, days: int = progress.COMPLETION_WINDOW_DAYS) -> OverallProgress:
        return progress.overall_progress(
            self._state.habits, self._state.ledger, days, today=self._today()
        )


__all__ = ["HabitState", "HabitTracker", "TrackerStatus"]
