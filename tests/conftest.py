"""Pytest configuration and shared fixtures for HabitLedger tests.

Provides an isolated SQLite database, stores, a tracker with a fixed clock
and a factory for habit definitions, so tests never touch real app data.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

import pytest

from habitledger.config import TestConfig
from habitledger.infra.database import create_db_engine, create_session_factory, init_database
from habitledger.infra.repositories import InMemoryHabitStore, SQLModelHabitStore
from habitledger.models import Frequency, Habit
from habitledger.services.ledger import CompletionLedger
from habitledger.services.tracker import HabitTracker

TODAY = date(2025, 1, 8)
NOW = datetime(2025, 1, 8, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point configuration at a temp dir and clear HABITLEDGER_* overrides."""

    import os

    for key in list(os.environ):
        if key.startswith("HABITLEDGER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HABITLEDGER_DATA_DIR", str(tmp_path / "data"))
    yield
    logger = logging.getLogger("habitledger")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create an isolated SQLite database file for each test.

    Built through ``create_db_engine`` so foreign keys are enforced as in the app.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    config = TestConfig()
    config.DATABASE_URL = f"sqlite:///{tmp_path / 'test.db'}"
    engine = create_db_engine(config)
    init_database(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def sql_store(session_factory) -> SQLModelHabitStore:
    return SQLModelHabitStore(session_factory)


@pytest.fixture
def memory_store() -> InMemoryHabitStore:
    return InMemoryHabitStore()


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def tracker(memory_store, clock) -> HabitTracker:
    """A loaded tracker over an empty in-memory store, pinned to TODAY."""

    t = HabitTracker(memory_store, clock=clock, today=lambda: TODAY)
    t.load()
    return t


@pytest.fixture
def habit_factory():
    """Build ``Habit`` value objects without going through the tracker."""

    counter = {"n": 0}

    def _create_habit(
        name: str = "Exercise",
        *,
        habit_id: str | None = None,
        target_count: int = 1,
        is_active: bool = True,
        frequency: Frequency = Frequency.DAILY,
    ) -> Habit:
        counter["n"] += 1
        return Habit(
            id=habit_id or f"habit-{counter['n']}",
            name=name,
            target_count=target_count,
            is_active=is_active,
            frequency=frequency,
            created_at=NOW,
            updated_at=NOW,
        )

    return _create_habit


@pytest.fixture
def empty_ledger() -> CompletionLedger:
    return CompletionLedger()
