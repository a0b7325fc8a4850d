"""Analytics modules for streaks, completion series and milestones."""

from .streaks import StreakAnalyzer
from .engine import AnalyticsEngine, SeriesPoint, detect_milestone, MILESTONE_DAYS

__all__ = ['StreakAnalyzer', 'AnalyticsEngine', 'SeriesPoint', 'detect_milestone', 'MILESTONE_DAYS']
