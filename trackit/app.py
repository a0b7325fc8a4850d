"""
TrackItApp: the single entry point a UI shell talks to.

Wires one HabitStore, the analytics and a PersistenceGateway together with
an injected ``today`` supplier and a ``notify(kind, payload)`` callback.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union
import logging
import random

from .analytics.engine import AnalyticsEngine
from .analytics.quotes import motivational_quote
from .analytics.streaks import StreakAnalyzer
from .core.exceptions import StorageError
from .core.models import AppState, FilterState
from .habits.store import HabitStore
from .storage.gateway import PersistenceGateway
from .utils.date import DateLike, format_date, to_date

Notifier = Callable[[str, Dict[str, Any]], None]

EVENT_ACHIEVEMENT = "achievement"
EVENT_ERROR = "error"


def _no_notify(kind: str, payload: Dict[str, Any]) -> None:
    pass


class TrackItApp:
    """Facade over the habit tracking core."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        today: Optional[Callable[[], date]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        notify: Optional[Notifier] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.gateway = gateway
        self.today = today or date.today
        self.notify = notify or _no_notify
        self.rng = rng
        self.store = HabitStore(clock=clock, logger=self.logger)
        self.analyzer = StreakAnalyzer(logger=self.logger)
        self.analytics = AnalyticsEngine(analyzer=self.analyzer, logger=self.logger)

    @property
    def state(self) -> AppState:
        return self.store.state

    def _today(self) -> date:
        return to_date(self.today())

    def _report(self, exc: Exception, operation: str) -> None:
        self.logger.error(f"{operation} failed: {exc}")
        self.notify(EVENT_ERROR, {
            "operation": operation,
            "error": type(exc).__name__,
            "message": str(exc),
        })

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def start(self) -> AppState:
        """
        Load the stored state. Unreadable or unavailable storage is reported
        through ``notify`` and the app continues with the default state.
        """
        try:
            result = self.gateway.load()
        except StorageError as exc:
            self._report(exc, "load")
            self.store.replace_state(AppState.default())
            return self.state

        if result.error is not None:
            self._report(result.error, "load")
        if result.migrated_from:
            self.logger.info(f"Loaded data migrated from '{result.migrated_from}'")
        self.store.replace_state(result.state)
        return self.state

    def save(self) -> None:
        """Persist the current state; failures are reported and re-raised."""
        try:
            self.gateway.save(self.state)
        except StorageError as exc:
            self._report(exc, "save")
            raise

    def import_bytes(self, blob: Union[bytes, str]) -> AppState:
        state = self.gateway.import_snapshot(blob)
        self.store.replace_state(state)
        self.save()
        return state

    def import_file(self, path: Union[str, Path]) -> AppState:
        return self.import_bytes(Path(path).expanduser().read_bytes())

    def export_file(self, directory: Optional[Union[str, Path]] = None) -> Path:
        return self.gateway.write_export(self.state, directory=directory, today=self._today())

    # ------------------------------------------------------------------
    # Mutations with side effects
    # ------------------------------------------------------------------
    def toggle(self, habit_id: str, day: Optional[DateLike] = None) -> bool:
        """
        Toggle completion for ``day`` (default today) and announce a newly
        reached streak milestone at most once.
        """
        today = self._today()
        target = to_date(day) if day is not None else today
        completed = self.store.toggle_completion(habit_id, target)
        if completed:
            self._check_milestone(habit_id, today)
        return completed

    def _check_milestone(self, habit_id: str, today: date) -> Optional[str]:
        if not self.state.settings.show_achievements:
            return None
        habit = self.store.get_habit(habit_id)
        streak = self.analyzer.current_streak(habit, today)
        milestone = self.analytics.pending_milestone(streak, self.state.achievements)
        if milestone is None:
            return None
        self.store.record_achievement(milestone)
        self.logger.info(f"Milestone {milestone} reached by habit {habit_id}")
        self.notify(EVENT_ACHIEVEMENT, {
            "milestone": milestone,
            "habit_id": habit.id,
            "habit_name": habit.name,
            "streak": streak,
        })
        return milestone

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------
    def dashboard(self, filter_state: FilterState = FilterState.ALL) -> list:
        today = self._today()
        habits = self.analytics.filter_habits(self.state.habits, filter_state, today)
        return [
            {
                "habit": habit,
                "completed_today": habit.is_completed_on(format_date(today)),
                "current_streak": self.analyzer.current_streak(habit, today),
                "week": self.analytics.habit_week(habit, today),
            }
            for habit in habits
        ]

    def analytics_view(self) -> Dict[str, Any]:
        today = self._today()
        habits = self.state.habits
        return {
            "empty": not habits,
            "weekly": self.analytics.weekly_series(habits, today),
            "monthly": self.analytics.monthly_series(habits, today),
            "summary": self.analytics.summary(habits, today),
            "quote": motivational_quote(self.rng),
        }
