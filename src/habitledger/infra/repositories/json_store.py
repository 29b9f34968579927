"""JSON document store: one file holding both habits and completions."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Sequence

from ...logging_config import get_logger
from ...models.completion import CompletionEntry
from ...models.habit import Habit

logger = get_logger(__name__)

HABITS_KEY = "habits"
COMPLETIONS_KEY = "completions"


class JsonFileHabitStore:
    """Stores ``{"habits": [...], "completions": [...]}`` in a single file.

    Writes go to a temporary file in the same directory which then replaces
    the target, so readers never see a half written document.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                document = json.load(fh)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.warning(
                "Stored data is unreadable; starting empty",
                extra={"path": str(self.path)},
                exc_info=True,
            )
            return {}
        if not isinstance(document, dict):
            logger.warning("Stored data has the wrong shape", extra={"path": str(self.path)})
            return {}
        return document

    def _load_list(self, key: str, parse) -> list:
        raw = self._read_document().get(key, [])
        if not isinstance(raw, list):
            logger.warning("Stored %s is not a list; starting empty", key)
            return []
        try:
            return [parse(item) for item in raw]
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Stored %s are malformed; starting empty", key, exc_info=True)
            return []

    def _write_key(self, key: str, items: list[dict[str, Any]]) -> None:
        document = self._read_document()
        document[key] = items
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, ensure_ascii=False, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def load_habits(self) -> list[Habit]:
        return self._load_list(HABITS_KEY, Habit.from_dict)

    def save_habits(self, habits: Sequence[Habit]) -> None:
        self._write_key(HABITS_KEY, [habit.to_dict() for habit in habits])

    def load_completions(self) -> list[CompletionEntry]:
        return self._load_list(COMPLETIONS_KEY, CompletionEntry.from_dict)

    def save_completions(self, completions: Sequence[CompletionEntry]) -> None:
        self._write_key(COMPLETIONS_KEY, [entry.to_dict() for entry in completions])


__all__ = ["JsonFileHabitStore"]
