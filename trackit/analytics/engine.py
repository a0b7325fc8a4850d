"""
Aggregate analytics across all habits.

Produces the weekly/monthly completion series, the cross-habit summary and
achievement milestone detection. Every method is a pure function of its
arguments.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from ..core.models import FilterState, Habit
from ..utils.date import DateLike, day_of_week, enumerate_trailing_days, parse_date, to_key
from .streaks import StreakAnalyzer

MILESTONE_DAYS = (3, 7, 14, 21, 30, 60, 90, 180, 365)
MILESTONE_PREFIX = "streak-"

WEEK_WINDOW = 7
MONTH_WINDOW = 30


def milestone_id(days: int) -> str:
    return f"{MILESTONE_PREFIX}{days}"


def detect_milestone(streak: int) -> Optional[str]:
    """Return the milestone id when ``streak`` equals a threshold exactly."""
    if streak in MILESTONE_DAYS:
        return milestone_id(streak)
    return None


@dataclass(frozen=True)
class SeriesPoint:
    """Share of habits completed on one day."""

    date: str
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "percentage": self.percentage}


class AnalyticsEngine:
    """Cross-habit aggregates built on top of StreakAnalyzer."""

    def __init__(self, analyzer: Optional[StreakAnalyzer] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.analyzer = analyzer or StreakAnalyzer(logger=self.logger)

    # ------------------------------------------------------------------
    # Series
    # ------------------------------------------------------------------
    def _series(self, habits: Sequence[Habit], days: int, today: DateLike) -> List[SeriesPoint]:
        total = len(habits)
        points = []
        for day in enumerate_trailing_days(days, today):
            if total == 0:
                points.append(SeriesPoint(day, 0.0))
                continue
            completed = sum(1 for habit in habits if habit.is_completed_on(day))
            points.append(SeriesPoint(day, completed / total * 100))
        return points

    def weekly_series(self, habits: Sequence[Habit], today: DateLike) -> List[SeriesPoint]:
        """Seven points, oldest first, ending at ``today``."""
        return self._series(habits, WEEK_WINDOW, today)

    def monthly_series(self, habits: Sequence[Habit], today: DateLike) -> List[SeriesPoint]:
        """Thirty points, oldest first, ending at ``today``."""
        return self._series(habits, MONTH_WINDOW, today)

    # ------------------------------------------------------------------
    # Streak aggregates
    # ------------------------------------------------------------------
    def best_streak_across_habits(self, habits: Iterable[Habit]) -> int:
        return max((self.analyzer.longest_streak(habit) for habit in habits), default=0)

    def total_current_streak_across_habits(self, habits: Iterable[Habit], today: DateLike) -> int:
        return sum(self.analyzer.current_streak(habit, today) for habit in habits)

    def most_consistent_habit(self, habits: Iterable[Habit], today: DateLike) -> Tuple[Optional[Habit], float]:
        """
        Habit with the highest 30-day completion rate.

        Ties go to the habit that comes first. Returns ``(None, 0.0)`` when
        there are no habits.
        """
        best: Optional[Habit] = None
        best_rate = 0.0
        for habit in habits:
            rate = self.analyzer.completion_rate(habit, MONTH_WINDOW, today)
            if best is None or rate > best_rate:
                best, best_rate = habit, rate
        return best, best_rate

    def weekday_totals(self, habits: Iterable[Habit]) -> List[int]:
        """Completion counts per weekday (0=Sunday) over the whole history."""
        totals = [0] * 7
        for habit in habits:
            for key in habit.completed_dates():
                if parse_date(key) is not None:
                    totals[day_of_week(key)] += 1
        return totals

    def most_active_weekday(self, habits: Iterable[Habit]) -> int:
        """Weekday with the most completions; ties go to the lowest index."""
        totals = self.weekday_totals(habits)
        return totals.index(max(totals))

    # ------------------------------------------------------------------
    # Milestones
    # ------------------------------------------------------------------
    def detect_milestone(self, streak: int) -> Optional[str]:
        return detect_milestone(streak)

    def pending_milestone(self, streak: int, achievements: Iterable[str]) -> Optional[str]:
        """The milestone for ``streak`` unless it was already shown."""
        milestone = detect_milestone(streak)
        if milestone is None or milestone in set(achievements):
            return None
        return milestone

    # ------------------------------------------------------------------
    # Dashboard and summary
    # ------------------------------------------------------------------
    def overall_consistency(self, habits: Sequence[Habit], today: DateLike, window_days: int = MONTH_WINDOW) -> int:
        """Rounded percentage of completed habit-days in the trailing window."""
        total = len(habits) * window_days
        if total == 0:
            return 0
        window = enumerate_trailing_days(window_days, today)
        completed = sum(1 for habit in habits for day in window if habit.is_completed_on(day))
        return round(completed / total * 100)

    def summary(self, habits: Sequence[Habit], today: DateLike) -> Dict[str, Any]:
        best_habit, best_rate = self.most_consistent_habit(habits, today)
        totals = self.weekday_totals(habits)
        return {
            "overall_consistency": self.overall_consistency(habits, today),
            "longest_streak": self.best_streak_across_habits(habits),
            "total_current_streak": self.total_current_streak_across_habits(habits, today),
            "best_habit": best_habit.name if best_habit is not None and best_rate > 0 else None,
            "best_habit_rate": best_rate,
            "most_active_weekday": totals.index(max(totals)) if any(totals) else None,
        }

    def habit_week(self, habit: Habit, today: DateLike) -> List[Tuple[str, bool]]:
        """(date, completed) for the seven days ending at ``today``."""
        return [(day, habit.is_completed_on(day)) for day in enumerate_trailing_days(WEEK_WINDOW, today)]

    def filter_habits(self, habits: Iterable[Habit], filter_state: FilterState, today: DateLike) -> List[Habit]:
        state = FilterState(filter_state)
        if state is FilterState.ALL:
            return list(habits)
        key = to_key(today)
        want_completed = state is FilterState.COMPLETED
        return [habit for habit in habits if habit.is_completed_on(key) == want_completed]

    def scheduled_habits(self, habits: Iterable[Habit], day: DateLike) -> List[Habit]:
        """Habits whose track days include the weekday of ``day``."""
        weekday = day_of_week(day)
        return [habit for habit in habits if weekday in habit.track_days]
