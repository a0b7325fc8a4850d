"""
trackit - habit tracking core.

Habits, categories and settings live in one AppState owned by a HabitStore;
streaks and analytics are pure functions of that state; a
PersistenceGateway moves it in and out of a key-value store.
"""

__version__ = "2.0.0"

from .app import TrackItApp
from .core import (
    AppState,
    Category,
    FilterState,
    Habit,
    Settings,
    Theme,
    TrackItError,
    ValidationError,
    DuplicateError,
    ImportFormatError,
    NotFoundError,
    StorageError,
    CorruptDataError,
    QuotaExceededError,
    StorageUnavailableError,
)
from .habits import HabitStore
from .analytics import AnalyticsEngine, StreakAnalyzer, detect_milestone
from .storage import FileStore, MemoryStore, PersistenceGateway

__all__ = [
    'TrackItApp',
    'AppState',
    'Category',
    'FilterState',
    'Habit',
    'Settings',
    'Theme',
    'TrackItError',
    'ValidationError',
    'DuplicateError',
    'ImportFormatError',
    'NotFoundError',
    'StorageError',
    'CorruptDataError',
    'QuotaExceededError',
    'StorageUnavailableError',
    'HabitStore',
    'AnalyticsEngine',
    'StreakAnalyzer',
    'detect_milestone',
    'FileStore',
    'MemoryStore',
    'PersistenceGateway',
]
