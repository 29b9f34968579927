"""Application context wiring config, store and tracker together."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import BaseConfig
from .domain.repositories.habit import HabitStore
from .infra.database import bootstrap_database
from .infra.repositories import JsonFileHabitStore, SQLModelHabitStore
from .logging_config import get_logger
from .services.tracker import HabitTracker

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Per-session handles; pass this around instead of reaching for globals."""

    config: BaseConfig
    store: HabitStore
    tracker: HabitTracker


def create_store(config: BaseConfig) -> HabitStore:
    if config.STORE == "json":
        return JsonFileHabitStore(config.JSON_PATH)
    _, session_factory = bootstrap_database(config)
    return SQLModelHabitStore(session_factory)


def create_app_context(config: Optional[BaseConfig] = None, *, load: bool = True) -> AppContext:
    """Build the store and tracker; loads persisted state unless ``load`` is False."""

    if config is None:
        config = BaseConfig()

    store = create_store(config)
    tracker = HabitTracker(
        store,
        completion_window_days=config.COMPLETION_WINDOW_DAYS,
        average_window_days=config.AVERAGE_WINDOW_DAYS,
    )
    if load:
        tracker.load()
    logger.debug("App context created", extra={"store": config.STORE})
    return AppContext(config=config, store=store, tracker=tracker)
