"""Shared test data builders."""

from datetime import date, datetime
from typing import List

from trackit.core.models import Habit

TODAY = date(2024, 3, 15)  # a Friday
NOW = datetime(2024, 3, 15, 9, 30, 0)


def make_habit(habit_id: str = "h1", name: str = "Run", days: List[str] = None) -> Habit:
    """Build a habit completed on the given date keys."""
    return Habit(
        id=habit_id,
        name=name,
        created_at="2024-01-01T08:00:00",
        history={day: True for day in (days or [])},
    )


def counter_ids(prefix: str = "id"):
    """Deterministic id factory: id1, id2, ..."""
    state = {"n": 0}

    def factory() -> str:
        state["n"] += 1
        return f"{prefix}{state['n']}"

    return factory
