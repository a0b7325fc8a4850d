"""
Streak and completion-rate calculations for a single habit.

All functions take ``today`` explicitly; nothing here reads the clock.
"""

from datetime import timedelta
from typing import List, Optional
import logging

from ..core.models import Habit
from ..utils.date import DateLike, enumerate_trailing_days, format_date, parse_date, to_date


class StreakAnalyzer:
    """
    Computes current streak, longest streak and completion rates.

    The two streak rules are deliberately different:
    - current streak walks back from ``today`` and is 0 when ``today``
      itself is not completed
    - longest streak is the best run anywhere in history
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def current_streak(self, habit: Habit, today: DateLike) -> int:
        """Consecutive completed days ending at ``today`` inclusive."""
        day = to_date(today)
        streak = 0
        while habit.history.get(format_date(day)) is True:
            streak += 1
            day -= timedelta(days=1)
        return streak

    def longest_streak(self, habit: Habit) -> int:
        """Longest run of consecutive completed calendar days."""
        dates = self._completed_dates(habit)

        best_streak = 0
        temp_streak = 0
        for i, d in enumerate(dates):
            if i > 0 and (d - dates[i - 1]).days == 1:
                temp_streak += 1
            else:
                temp_streak = 1
            best_streak = max(best_streak, temp_streak)

        return best_streak

    def completion_rate(self, habit: Habit, window_days: int, today: DateLike) -> float:
        """
        Percentage of the trailing ``window_days`` (ending at ``today``) that
        were completed. Returns 0.0 for an empty window.
        """
        if window_days < 0:
            raise ValueError("window_days cannot be negative")
        if window_days == 0:
            return 0.0
        window = enumerate_trailing_days(window_days, today)
        completed = sum(1 for day in window if habit.history.get(day) is True)
        return completed / window_days * 100

    def streak_info(self, habit: Habit, today: DateLike) -> dict:
        return {
            "current": self.current_streak(habit, today),
            "best": self.longest_streak(habit),
        }

    def _completed_dates(self, habit: Habit) -> List:
        dates = set()
        for key, value in habit.history.items():
            if value is not True:
                continue
            parsed = parse_date(key)
            if parsed is None:
                self.logger.debug(f"Ignoring malformed history key {key!r} on habit {habit.id}")
                continue
            dates.add(parsed)
        return sorted(dates)
