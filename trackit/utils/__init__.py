"""
Utility functions for trackit.
"""

from .date import (
    parse_date, format_date, to_date, to_key, enumerate_trailing_days,
    day_of_week, days_between, weekday_labels
)
from .io import read_text, atomic_write, remove_file

__all__ = [
    # Date utilities
    'parse_date',
    'format_date',
    'to_date',
    'to_key',
    'enumerate_trailing_days',
    'day_of_week',
    'days_between',
    'weekday_labels',
    # I/O utilities
    'read_text',
    'atomic_write',
    'remove_file',
]
