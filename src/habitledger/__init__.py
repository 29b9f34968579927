"""HabitLedger: habit completion ledger and progress analytics."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .services.ledger import CompletionLedger
from .services.tracker import HabitState, HabitTracker, TrackerStatus

__all__ = [
    "BaseConfig",
    "CompletionLedger",
    "DevConfig",
    "HabitState",
    "HabitTracker",
    "TrackerStatus",
]
