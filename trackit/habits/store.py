"""HabitStore: validated, synchronous mutations of the application state."""

import re
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional
from uuid import uuid4
import logging

from ..core.exceptions import DuplicateError, NotFoundError, ValidationError
from ..core.models import ALL_DAYS, AppState, Category, Habit, Settings, Theme, check_setting
from ..utils.date import DateLike, to_key

HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class HabitStore:
    """
    Owns the single mutable AppState for the process lifetime.

    Every method is an atomic mutation: it validates first and only then
    touches the state, so a raised error leaves the state unchanged.
    Persisting is the caller's job.
    """

    def __init__(
        self,
        state: Optional[AppState] = None,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._state = state if state is not None else AppState.default()
        self.clock = clock or datetime.now
        self.id_factory = id_factory or (lambda: uuid4().hex)
        self.logger = logger or logging.getLogger(__name__)

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def habits(self) -> List[Habit]:
        return self._state.habits

    @property
    def categories(self) -> List[Category]:
        return self._state.categories

    @property
    def settings(self) -> Settings:
        return self._state.settings

    def replace_state(self, state: AppState) -> None:
        """Install a state produced by load or import."""
        self._state = state
        self.logger.debug(f"State replaced ({len(state.habits)} habits)")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def get_habit(self, habit_id: str) -> Habit:
        habit = self._state.find_habit(habit_id)
        if habit is None:
            raise NotFoundError("Habit", habit_id)
        return habit

    def get_category(self, category_id: str) -> Category:
        category = self._state.find_category(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _clean_name(name: Any, what: str = "Habit name") -> str:
        cleaned = name.strip() if isinstance(name, str) else ""
        if not cleaned:
            raise ValidationError(f"{what} cannot be empty")
        return cleaned

    def _check_category_ref(self, category_id: Optional[str]) -> str:
        if not category_id:
            return ""
        self.get_category(category_id)
        return category_id

    @staticmethod
    def _check_track_days(days: Optional[Iterable[int]]) -> List[int]:
        if days is None:
            return list(ALL_DAYS)
        cleaned = set()
        for day in days:
            if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
                raise ValidationError(f"Invalid weekday index: {day!r}")
            cleaned.add(day)
        if not cleaned:
            raise ValidationError("A habit must be tracked on at least one day")
        return sorted(cleaned)

    @staticmethod
    def _check_color(color: Any) -> str:
        if not isinstance(color, str) or not HEX_COLOR_RE.match(color):
            raise ValidationError(f"Invalid color: {color!r}")
        return color

    def _check_category_name(self, name: Any, exclude_id: Optional[str] = None) -> str:
        cleaned = self._clean_name(name, "Category name")
        folded = cleaned.casefold()
        for category in self._state.categories:
            if category.id != exclude_id and category.name.casefold() == folded:
                raise DuplicateError(f"Category '{cleaned}' already exists")
        return cleaned

    @staticmethod
    def _day_key(day: DateLike) -> str:
        try:
            return to_key(day)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

    def _fresh_id(self, taken: Iterable[str], prefix: str = "") -> str:
        taken = set(taken)
        while True:
            candidate = f"{prefix}{self.id_factory()}"
            if candidate not in taken:
                return candidate

    # ------------------------------------------------------------------
    # Habits
    # ------------------------------------------------------------------
    def add_habit(
        self,
        name: str,
        category: Optional[str] = None,
        track_days: Optional[Iterable[int]] = None,
    ) -> Habit:
        """Create a habit and append it to the state."""
        cleaned = self._clean_name(name)
        category_id = self._check_category_ref(category)
        days = self._check_track_days(track_days)

        habit = Habit(
            id=self._fresh_id(h.id for h in self._state.habits),
            name=cleaned,
            created_at=self.clock().isoformat(timespec="seconds"),
            category=category_id,
            track_days=days,
        )
        self._state.habits.append(habit)
        self.logger.debug(f"Added habit {habit.id} '{habit.name}'")
        return habit

    def rename_habit(self, habit_id: str, new_name: str) -> None:
        habit = self.get_habit(habit_id)
        habit.name = self._clean_name(new_name)
        self.logger.debug(f"Renamed habit {habit_id} to '{habit.name}'")

    def delete_habit(self, habit_id: str) -> None:
        """Remove a habit together with its whole history."""
        self.get_habit(habit_id)
        self._state.habits = [h for h in self._state.habits if h.id != habit_id]
        self.logger.debug(f"Deleted habit {habit_id}")

    def delete_all_habits(self) -> int:
        """Remove every habit; categories, settings and achievements stay."""
        count = len(self._state.habits)
        self._state.habits = []
        self.logger.info(f"Deleted all {count} habits")
        return count

    def set_habit_category(self, habit_id: str, category_id: Optional[str]) -> None:
        habit = self.get_habit(habit_id)
        habit.category = self._check_category_ref(category_id)

    def set_track_days(self, habit_id: str, days: Iterable[int]) -> None:
        habit = self.get_habit(habit_id)
        habit.track_days = self._check_track_days(list(days))

    def set_completion(self, habit_id: str, day: DateLike, completed: bool) -> None:
        """
        Mark or unmark a habit for one calendar day.

        Unmarking deletes the history key rather than storing ``False``.
        Setting the value it already has is a no-op.
        """
        habit = self.get_habit(habit_id)
        key = self._day_key(day)
        if completed:
            habit.history[key] = True
        else:
            habit.history.pop(key, None)

    def toggle_completion(self, habit_id: str, day: DateLike) -> bool:
        """Flip completion for one day and return the new state."""
        habit = self.get_habit(habit_id)
        key = self._day_key(day)
        new_state = not habit.is_completed_on(key)
        self.set_completion(habit_id, key, new_state)
        self.logger.debug(f"Habit {habit_id} on {key}: {'done' if new_state else 'not done'}")
        return new_state

    def reset_all_history(self) -> None:
        """Clear every habit's history; habits, categories and settings stay."""
        for habit in self._state.habits:
            habit.history = {}
        self.logger.info("Cleared history of all habits")

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------
    def add_category(self, name: str, color: str) -> Category:
        cleaned = self._check_category_name(name)
        category = Category(
            id=self._fresh_id((c.id for c in self._state.categories), prefix="cat-"),
            name=cleaned,
            color=self._check_color(color),
        )
        self._state.categories.append(category)
        self.logger.debug(f"Added category {category.id} '{category.name}'")
        return category

    def update_category(self, category_id: str, name: Optional[str] = None, color: Optional[str] = None) -> Category:
        category = self.get_category(category_id)
        new_name = self._check_category_name(name, exclude_id=category_id) if name is not None else category.name
        new_color = self._check_color(color) if color is not None else category.color
        category.name = new_name
        category.color = new_color
        return category

    def delete_category(self, category_id: str) -> None:
        """
        Remove a category.

        Habits that referenced it become uncategorized; no habit is deleted.
        """
        self.get_category(category_id)
        cleared = 0
        for habit in self._state.habits:
            if habit.category == category_id:
                habit.category = ""
                cleared += 1
        self._state.categories = [c for c in self._state.categories if c.id != category_id]
        self.logger.debug(f"Deleted category {category_id}, cleared {cleared} habit(s)")

    # ------------------------------------------------------------------
    # Settings, theme, achievements
    # ------------------------------------------------------------------
    def update_settings(self, **changes: Any) -> Settings:
        """
        Update settings by JSON name (``weekStartsOn``) or attribute name
        (``week_starts_on``). All changes are validated before any is applied.
        """
        by_attr = {attr: attr for attr in Settings.FIELDS.values()}
        by_attr.update(Settings.FIELDS)

        validated = {}
        for key, value in changes.items():
            attr = by_attr.get(key)
            if attr is None:
                raise ValidationError(f"Unknown setting: {key}")
            validated[attr] = check_setting(attr, value)

        for attr, value in validated.items():
            setattr(self._state.settings, attr, value)
        return self._state.settings

    def set_theme(self, theme: Any) -> str:
        try:
            value = Theme(theme.value if isinstance(theme, Theme) else theme).value
        except ValueError:
            raise ValidationError(f"Unknown theme: {theme!r}") from None
        self._state.theme = value
        return value

    def toggle_theme(self) -> str:
        return self.set_theme(Theme.LIGHT if self._state.theme == Theme.DARK.value else Theme.DARK)

    def record_achievement(self, milestone_id: str) -> bool:
        """Append a shown milestone. Returns False if it was already recorded."""
        if milestone_id in self._state.achievements:
            return False
        self._state.achievements.append(milestone_id)
        return True

    def clear_all(self) -> None:
        """Reset to the default state."""
        self._state = AppState.default()
        self.logger.info("Reset all data to defaults")
