"""Habit and category management."""

from .store import HabitStore

__all__ = ['HabitStore']
