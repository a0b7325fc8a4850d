"""
Core module for trackit - contains domain models, paths, configuration and exceptions.
"""

from .models import (
    AppState,
    Category,
    FilterState,
    Habit,
    Settings,
    Theme,
    SCHEMA_VERSION
)

from .exceptions import (
    TrackItError,
    ValidationError,
    DuplicateError,
    ImportFormatError,
    NotFoundError,
    StorageError,
    CorruptDataError,
    QuotaExceededError,
    StorageUnavailableError
)

__all__ = [
    # Models
    'AppState',
    'Category',
    'FilterState',
    'Habit',
    'Settings',
    'Theme',
    'SCHEMA_VERSION',
    # Exceptions
    'TrackItError',
    'ValidationError',
    'DuplicateError',
    'ImportFormatError',
    'NotFoundError',
    'StorageError',
    'CorruptDataError',
    'QuotaExceededError',
    'StorageUnavailableError'
]
