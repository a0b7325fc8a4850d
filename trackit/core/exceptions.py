"""
Exception classes for trackit.
"""

from typing import Optional


class TrackItError(Exception):
    """Base exception for all trackit errors."""
    pass


class ValidationError(TrackItError):
    """Raised when user input is invalid (empty name, bad color, ...)."""
    pass


class DuplicateError(ValidationError):
    """Raised when a category name collides with an existing one."""
    pass


class ImportFormatError(ValidationError):
    """Raised when an imported snapshot is not JSON or lacks a habits list."""
    pass


class NotFoundError(TrackItError):
    """Raised when an operation references an id that does not exist."""

    def __init__(self, kind: str, item_id: str):
        super().__init__(f"{kind} not found: {item_id}")
        self.kind = kind
        self.item_id = item_id


class StorageError(TrackItError):
    """Base exception for persistence failures."""
    pass


class CorruptDataError(StorageError):
    """Raised when a persisted record cannot be parsed."""

    def __init__(self, key: str, raw: Optional[str] = None, reason: str = ""):
        message = f"Stored data under '{key}' is unreadable"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.key = key
        self.raw = raw


class QuotaExceededError(StorageError):
    """Raised when the store rejects a write because it is full."""
    pass


class StorageUnavailableError(StorageError):
    """Raised when the store cannot be read or written at all."""
    pass
