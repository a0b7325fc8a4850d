"""
Domain models for trackit.

This module contains the data structures that make up the persisted
application state. Python attributes are snake_case; ``to_dict`` and
``from_dict`` translate to and from the camelCase JSON record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import re

from ..utils.date import format_date, parse_date
from .exceptions import ValidationError

SCHEMA_VERSION = 2

ALL_DAYS: List[int] = [0, 1, 2, 3, 4, 5, 6]

REMINDER_TIME_RE = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")
LAYOUTS = ("grid", "list")


class Theme(Enum):
    """Color scheme of the UI shell."""

    LIGHT = "light"
    DARK = "dark"


class FilterState(Enum):
    """Which habits a dashboard query returns, relative to a given day."""

    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"


def _split_extra(data: Dict[str, Any], known: tuple) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if key not in known}


def canonical_history(raw: Any) -> Dict[str, bool]:
    """Keep only completed, well-formed date keys, rewritten as YYYY-MM-DD.

    Absence means "not completed", so explicit ``false`` entries are dropped.
    """
    if not isinstance(raw, dict):
        return {}
    history: Dict[str, bool] = {}
    for key, value in raw.items():
        if value is not True:
            continue
        parsed = parse_date(key)
        if parsed is not None:
            history[format_date(parsed)] = True
    return history


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def canonical_track_days(raw: Any) -> List[int]:
    if not isinstance(raw, (list, tuple, set)):
        return list(ALL_DAYS)
    days = sorted({day for day in raw if isinstance(day, int) and not isinstance(day, bool) and 0 <= day <= 6})
    return days or list(ALL_DAYS)


@dataclass
class Habit:
    """One tracked behavior and its sparse completion history."""

    id: str
    name: str
    created_at: str
    history: Dict[str, bool] = field(default_factory=dict)
    category: str = ""
    track_days: List[int] = field(default_factory=lambda: list(ALL_DAYS))
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN = ("id", "name", "category", "createdAt", "history", "trackDays")

    def is_completed_on(self, day: str) -> bool:
        return self.history.get(day) is True

    def completed_dates(self) -> List[str]:
        """Completed date keys in ascending order."""
        return sorted(key for key, value in self.history.items() if value is True)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "createdAt": self.created_at,
            "history": {key: True for key in sorted(self.history) if self.history[key] is True},
            "trackDays": list(self.track_days),
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], fallback_created_at: Optional[str] = None) -> Habit:
        created_at = data.get("createdAt") or fallback_created_at or datetime.now().isoformat(timespec="seconds")
        category = data.get("category") or ""
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            created_at=str(created_at),
            history=canonical_history(data.get("history")),
            category=str(category),
            track_days=canonical_track_days(data.get("trackDays")),
            extra=_split_extra(data, cls._KNOWN),
        )


@dataclass
class Category:
    """A named, colored grouping of habits."""

    id: str
    name: str
    color: str
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN = ("id", "name", "color")

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({"id": self.id, "name": self.name, "color": self.color})
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Category:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            color=str(data.get("color", "#888888")),
            extra=_split_extra(data, cls._KNOWN),
        )


def check_setting(attr: str, value: Any) -> Any:
    """Validate one settings value by attribute name, returning it unchanged."""
    if attr == "layout":
        if value not in LAYOUTS:
            raise ValidationError(f"layout must be one of {', '.join(LAYOUTS)}")
    elif attr == "week_starts_on":
        if isinstance(value, bool) or value not in (0, 1):
            raise ValidationError("weekStartsOn must be 0 or 1")
    elif attr == "reminder_time":
        if not isinstance(value, str) or not REMINDER_TIME_RE.match(value):
            raise ValidationError("reminderTime must be HH:MM")
    elif not isinstance(value, bool):
        raise ValidationError(f"{attr} must be true or false")
    return value


@dataclass
class Settings:
    """Process-wide user preferences."""

    layout: str = "grid"
    week_starts_on: int = 0
    reminder_time: str = "20:00"
    show_reminders: bool = False
    show_achievements: bool = True
    extra: Dict[str, Any] = field(default_factory=dict)

    # JSON key -> attribute name
    FIELDS = {
        "layout": "layout",
        "weekStartsOn": "week_starts_on",
        "reminderTime": "reminder_time",
        "showReminders": "show_reminders",
        "showAchievements": "show_achievements",
    }

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        for key, attr in self.FIELDS.items():
            data[key] = getattr(self, attr)
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Settings:
        settings = cls()
        if not isinstance(data, dict):
            return settings
        for key, attr in cls.FIELDS.items():
            if key not in data:
                continue
            # Invalid stored values keep the default.
            try:
                setattr(settings, attr, check_setting(attr, data[key]))
            except ValidationError:
                continue
        settings.extra = _split_extra(data, tuple(cls.FIELDS))
        return settings


DEFAULT_CATEGORIES = [
    ("health", "Health", "#4caf50"),
    ("productivity", "Productivity", "#2196f3"),
    ("mindfulness", "Mindfulness", "#9c27b0"),
    ("learning", "Learning", "#ff9800"),
]


def default_categories() -> List[Category]:
    return [Category(id=cid, name=name, color=color) for cid, name, color in DEFAULT_CATEGORIES]


@dataclass
class AppState:
    """Root aggregate persisted as one record."""

    habits: List[Habit] = field(default_factory=list)
    categories: List[Category] = field(default_factory=default_categories)
    settings: Settings = field(default_factory=Settings)
    theme: str = Theme.LIGHT.value
    achievements: List[str] = field(default_factory=list)
    version: int = SCHEMA_VERSION
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN = ("habits", "categories", "settings", "theme", "achievements", "version")

    @classmethod
    def default(cls) -> AppState:
        return cls()

    def find_habit(self, habit_id: str) -> Optional[Habit]:
        for habit in self.habits:
            if habit.id == habit_id:
                return habit
        return None

    def find_category(self, category_id: str) -> Optional[Category]:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "version": self.version,
            "habits": [habit.to_dict() for habit in self.habits],
            "categories": [category.to_dict() for category in self.categories],
            "settings": self.settings.to_dict(),
            "theme": self.theme,
            "achievements": list(self.achievements),
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppState:
        """Build a state from a record that already carries every field."""
        theme = data.get("theme", Theme.LIGHT.value)
        if theme not in (Theme.LIGHT.value, Theme.DARK.value):
            theme = Theme.LIGHT.value

        achievements: List[str] = []
        for milestone in _as_list(data.get("achievements")):
            if isinstance(milestone, str) and milestone not in achievements:
                achievements.append(milestone)

        return cls(
            habits=[Habit.from_dict(entry) for entry in _as_list(data.get("habits")) if isinstance(entry, dict) and "id" in entry],
            categories=[Category.from_dict(entry) for entry in _as_list(data.get("categories")) if isinstance(entry, dict) and "id" in entry],
            settings=Settings.from_dict(data.get("settings")),
            theme=theme,
            achievements=achievements,
            version=SCHEMA_VERSION,
            extra=_split_extra(data, cls._KNOWN),
        )
