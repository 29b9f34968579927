"""SQLModel implementation of the habit store."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select

from ...logging_config import get_logger
from ...models.completion import CompletionEntry
from ...models.habit import Habit
from ...models.tables import CompletionRecord, HabitRecord
from ..database import SessionFactory

logger = get_logger(__name__)


class SQLModelHabitStore:
    """Keeps habits and completions in two tables.

    Each save makes a table match the given collection inside one session
    scope, so a failed save leaves the previously committed rows in place.
    """

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def load_habits(self) -> list[Habit]:
        habits: list[Habit] = []
        try:
            with self.session_factory() as session:
                rows = session.exec(select(HabitRecord).order_by(HabitRecord.position)).all()
                for row in rows:
                    try:
                        habits.append(row.to_habit())
                    except (TypeError, ValueError):
                        logger.warning("Skipping unreadable habit row", extra={"habit_id": row.id})
        except SQLAlchemyError:
            logger.warning("Failed to load habits; starting empty", exc_info=True)
            return []
        return habits

    def save_habits(self, habits: Sequence[Habit]) -> None:
        # Completion rows reference habit ids; surviving rows are updated in place.
        keep = [habit.id for habit in habits]
        with self.session_factory() as session:
            session.connection().execute(
                delete(HabitRecord).where(col(HabitRecord.id).not_in(keep))
            )
            for position, habit in enumerate(habits):
                session.merge(HabitRecord.from_habit(habit, position=position))

    def load_completions(self) -> list[CompletionEntry]:
        entries: list[CompletionEntry] = []
        try:
            with self.session_factory() as session:
                rows = session.exec(
                    select(CompletionRecord).order_by(CompletionRecord.position)
                ).all()
                for row in rows:
                    try:
                        entries.append(row.to_entry())
                    except (TypeError, ValueError):
                        logger.warning(
                            "Skipping unreadable completion row", extra={"entry_id": row.id}
                        )
        except SQLAlchemyError:
            logger.warning("Failed to load completions; starting empty", exc_info=True)
            return []
        return entries

    def save_completions(self, completions: Sequence[CompletionEntry]) -> None:
        with self.session_factory() as session:
            session.connection().execute(delete(CompletionRecord))
            for position, entry in enumerate(completions):
                session.add(CompletionRecord.from_entry(entry, position=position))


__all__ = ["SQLModelHabitStore"]
