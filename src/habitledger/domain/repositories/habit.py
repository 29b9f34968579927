"""Storage collaborator protocol for habits and completions."""

from __future__ import annotations

from typing import Protocol, Sequence

from ...models.completion import CompletionEntry
from ...models.habit import Habit


class HabitStore(Protocol):
    """Durable home for the habit registry and completion ledger.

    Loads never raise on corrupt persisted data; they return what could be
    read, or an empty list. Saves replace the whole collection and raise on
    failure.
    """

    def load_habits(self) -> list[Habit]:
        """Return the stored habits in registry order."""
        ...

    def save_habits(self, habits: Sequence[Habit]) -> None:
        """Replace the stored habits with ``habits``."""
        ...

    def load_completions(self) -> list[CompletionEntry]:
        """Return every stored completion entry."""
        ...

    def save_completions(self, completions: Sequence[CompletionEntry]) -> None:
        """Replace the stored completion entries with ``completions``."""
        ...
