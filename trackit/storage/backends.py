"""
Key-value stores that hold the serialized application state.

A store maps string keys to UTF-8 text values. Backends translate their
own failures into ``QuotaExceededError`` / ``StorageUnavailableError``.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Union
import logging

from ..core.exceptions import QuotaExceededError, StorageUnavailableError
from ..utils.io import atomic_write, read_text, remove_file

_KEY_RE = re.compile(r"^[A-Za-z0-9._-]+$")


class KeyValueStore(ABC):
    """Minimal durable key-value interface."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored text, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns False if it was absent."""

    @abstractmethod
    def keys(self) -> List[str]:
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class MemoryStore(KeyValueStore):
    """
    In-process store.

    Args:
        quota_bytes: Optional cap on the total UTF-8 size of all values
        available: When False every operation raises StorageUnavailableError
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None, quota_bytes: Optional[int] = None, available: bool = True):
        self._data: Dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes
        self.available = available

    def _check_available(self) -> None:
        if not self.available:
            raise StorageUnavailableError("Storage is not available")

    def get(self, key: str) -> Optional[str]:
        self._check_available()
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._check_available()
        if self.quota_bytes is not None:
            used = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
            if used + len(value.encode("utf-8")) > self.quota_bytes:
                raise QuotaExceededError(f"Writing '{key}' would exceed the {self.quota_bytes} byte quota")
        self._data[key] = value

    def delete(self, key: str) -> bool:
        self._check_available()
        return self._data.pop(key, None) is not None

    def keys(self) -> List[str]:
        self._check_available()
        return sorted(self._data)


class FileStore(KeyValueStore):
    """One ``<key>.json`` file per key under a directory."""

    SUFFIX = ".json"

    def __init__(self, directory: Optional[Union[str, Path]] = None, logger: Optional[logging.Logger] = None):
        if directory is None:
            from ..core.config import get_data_dir
            directory = get_data_dir()
        self.directory = Path(directory).expanduser()
        self.logger = logger or logging.getLogger(__name__)

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> Optional[str]:
        return read_text(self._path(key))

    def set(self, key: str, value: str) -> None:
        path = atomic_write(self._path(key), value)
        self.logger.debug(f"Wrote {len(value)} chars to {path}")

    def delete(self, key: str) -> bool:
        return remove_file(self._path(key))

    def keys(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(
            path.name[:-len(self.SUFFIX)]
            for path in self.directory.iterdir()
            if path.is_file() and path.name.endswith(self.SUFFIX) and not path.name.startswith(".")
        )
