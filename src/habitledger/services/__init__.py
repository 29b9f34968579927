"""Service module exports."""

from . import ledger, progress, streaks, tracker

__all__ = ["ledger", "progress", "streaks", "tracker"]
