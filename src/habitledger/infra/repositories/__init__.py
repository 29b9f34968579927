"""Concrete habit store implementations."""

from .habit import SQLModelHabitStore
from .json_store import JsonFileHabitStore
from .memory import InMemoryHabitStore

__all__ = ["InMemoryHabitStore", "JsonFileHabitStore", "SQLModelHabitStore"]
