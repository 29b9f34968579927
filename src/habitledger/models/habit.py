"""Habit definitions and the starter habit set."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..errors import ValidationError


class Frequency(str, Enum):
    """Advisory cadence; the ledger does not enforce it."""

    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


def validate_habit_fields(name: object, target_count: object) -> None:
    """Reject an empty name or a target count below one."""

    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Habit name must not be empty")
    if isinstance(target_count, bool) or not isinstance(target_count, int) or target_count < 1:
        raise ValidationError(f"targetCount must be a positive integer, got {target_count!r}")


@dataclass(frozen=True, slots=True)
class NewHabit:
    """Caller supplied fields for ``add_habit``; id and timestamps are assigned on add."""

    name: str
    description: Optional[str] = None
    color: str = "#3B82F6"
    icon: str = "✅"
    frequency: Frequency = Frequency.DAILY
    target_count: int = 1
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class Habit:
    """A tracked behaviour. ``id`` never changes after creation."""

    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    color: str = "#3B82F6"
    icon: str = "✅"
    frequency: Frequency = Frequency.DAILY
    target_count: int = 1
    is_active: bool = True

    @property
    def is_multi_count(self) -> bool:
        return self.target_count > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "icon": self.icon,
            "frequency": self.frequency.value,
            "targetCount": self.target_count,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Habit":
        """Build a habit from its stored camelCase form.

        Raises KeyError/TypeError/ValueError on a malformed document.
        """
        target_count = data.get("targetCount", 1)
        validate_habit_fields(data["name"], target_count)
        is_active = data.get("isActive", True)
        if not isinstance(is_active, bool):
            raise TypeError(f"isActive must be a boolean, got {is_active!r}")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description"),
            color=data.get("color", "#3B82F6"),
            icon=data.get("icon", "✅"),
            frequency=Frequency(data.get("frequency", "daily")),
            target_count=target_count,
            is_active=is_active,
            created_at=datetime.fromisoformat(data["createdAt"]),
            updated_at=datetime.fromisoformat(data["updatedAt"]),
        )


def active_habits(habits) -> list[Habit]:
    return [habit for habit in habits if habit.is_active]


def contrast_color(background: str) -> str:
    """Black or white text colour for a ``#RRGGBB`` background tag."""

    hex_value = background.lstrip("#")
    if len(hex_value) != 6:
        raise ValueError(f"Expected a #RRGGBB colour, got {background!r}")
    r, g, b = (int(hex_value[i : i + 2], 16) for i in (0, 2, 4))
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#000000" if luminance > 0.5 else "#FFFFFF"


DEFAULT_HABITS: tuple[NewHabit, ...] = (
    NewHabit(
        name="Drink Water",
        description="Stay hydrated throughout the day",
        color="#3B82F6",
        icon="💧",
        target_count=8,
    ),
    NewHabit(
        name="Exercise",
        description="Get moving with any physical activity",
        color="#EF4444",
        icon="🏃‍♂️",
    ),
    NewHabit(
        name="Read",
        description="Read for personal growth",
        color="#10B981",
        icon="📚",
    ),
    NewHabit(
        name="Meditate",
        description="Practice mindfulness",
        color="#8B5CF6",
        icon="🧘‍♀️",
    ),
    NewHabit(
        name="Sleep 8+ Hours",
        description="Get quality rest",
        color="#F59E0B",
        icon="😴",
    ),
    NewHabit(
        name="Journal",
        description="Reflect on your day",
        color="#EC4899",
        icon="✍️",
    ),
)

HABIT_COLORS: tuple[str, ...] = (
    "#3B82F6",  # blue
    "#EF4444",  # red
    "#10B981",  # green
    "#8B5CF6",  # purple
    "#F59E0B",  # yellow
    "#EC4899",  # pink
    "#06B6D4",  # cyan
    "#84CC16",  # lime
    "#F97316",  # orange
    "#6366F1",  # indigo
)

HABIT_ICONS: tuple[str, ...] = (
    "💧", "🏃‍♂️", "📚", "🧘‍♀️", "😴", "✍️", "🍎", "💻",
    "🎵", "🎨", "🧹", "☕", "🌱", "💪", "🚶‍♀️", "🧠",
    "❤️", "🌟", "⚡", "🔥", "🎯", "🏆", "✨", "🌈",
)
