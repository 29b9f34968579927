"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

ENV_PREFIX = "HABITLEDGER_"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = _env(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Interpret environment variable values as integers."""

    value = _env(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitLedger"
    DB_FILENAME = "habitledger.db"
    JSON_FILENAME = "habits.json"
    STORE_BACKENDS = ("sqlite", "json")
    SQLITE_PRAGMAS = {"foreign_keys": "on"}

    def __init__(self) -> None:
        self.DEV_MODE = _env_bool("DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = _env("DATABASE_URL") or self._build_sqlite_url()
        self.STORE = (_env("STORE") or "sqlite").strip().lower()
        if self.STORE not in self.STORE_BACKENDS:
            raise ValueError(
                f"{ENV_PREFIX}STORE must be one of {', '.join(self.STORE_BACKENDS)}"
            )
        self.JSON_PATH = Path(_env("JSON_PATH") or self.DATA_DIR / self.JSON_FILENAME)
        self.COMPLETION_WINDOW_DAYS = _env_int("COMPLETION_WINDOW_DAYS", 30)
        self.AVERAGE_WINDOW_DAYS = _env_int("AVERAGE_WINDOW_DAYS", 84)
        self.WEEK_STARTS_ON = _env_int("WEEK_STARTS_ON", 0)
        if not 0 <= self.WEEK_STARTS_ON <= 6:
            raise ValueError(f"{ENV_PREFIX}WEEK_STARTS_ON must be between 0 and 6.")
        if self.COMPLETION_WINDOW_DAYS < 1 or self.AVERAGE_WINDOW_DAYS < 7:
            raise ValueError("Analytics windows must cover at least one day / one week.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the database, JSON store and logs live."""

        data_root = _env("DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Fall back to user-local storage when the configured location is read-only.
            local_data = os.getenv("XDG_DATA_HOME") or os.getenv("LOCALAPPDATA")
            root = Path(local_data).expanduser() if local_data else Path.home() / ".local" / "share"
            fallback_path = root / self.APP_NAME
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside DATA_DIR."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration for the test suite; callers point DATA_DIR at a temp dir."""

    __test__ = False

    DEBUG = False
    TESTING = True
