"""Exception types raised by the habit tracker core."""

from __future__ import annotations

from typing import Optional


class HabitLedgerError(Exception):
    code = "habitledger_error"

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ValidationError(HabitLedgerError, ValueError):
    """Rejected input; raised before any state is touched."""

    code = "validation_error"


class NotFoundError(HabitLedgerError, LookupError):
    code = "not_found"


class PersistenceError(HabitLedgerError):
    """The storage collaborator failed to write; in-memory state was kept as before."""

    code = "persistence_failed"


class InvalidStateError(HabitLedgerError):
    """Action issued in the wrong lifecycle state (e.g. before the initial load)."""

    code = "invalid_state"


__all__ = [
    "HabitLedgerError",
    "InvalidStateError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]
