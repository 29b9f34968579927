"""In-memory habit store for tests and throwaway sessions."""

from __future__ import annotations

from typing import Sequence

from ...models.completion import CompletionEntry
from ...models.habit import Habit


class InMemoryHabitStore:
    def __init__(
        self,
        habits: Sequence[Habit] = (),
        completions: Sequence[CompletionEntry] = (),
    ):
        self.habits: list[Habit] = list(habits)
        self.completions: list[CompletionEntry] = list(completions)
        self.save_calls = 0

    def load_habits(self) -> list[Habit]:
        return list(self.habits)

    def save_habits(self, habits: Sequence[Habit]) -> None:
        self.save_calls += 1
        self.habits = list(habits)

    def load_completions(self) -> list[CompletionEntry]:
        return list(self.completions)

    def save_completions(self, completions: Sequence[CompletionEntry]) -> None:
        self.save_calls += 1
        self.completions = list(completions)


__all__ = ["InMemoryHabitStore"]
