"""
PersistenceGateway: load, save, import and export of the application state.

The whole state is one JSON record under a single canonical key. Loading
and importing both run the same schema upgrade and shallow merge onto the
default state, so records written by older versions come back complete.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging

from ..core.exceptions import CorruptDataError, ImportFormatError, StorageError
from ..core.models import SCHEMA_VERSION, AppState
from ..utils.date import format_date
from ..utils.io import atomic_write
from .backends import KeyValueStore

STORAGE_KEY = "trackItData"
LIST_FIELDS = ("habits", "categories", "achievements")
LEGACY_KEYS = ("trackitAppData",)
CORRUPT_SUFFIX = ".corrupt"
EXPORT_PREFIX = "trackit-backup-"


@dataclass
class LoadResult:
    """Outcome of ``PersistenceGateway.load``.

    ``error`` is set when the stored record was unreadable; ``state`` is then
    the default state and the raw text was set aside under
    ``<key>.corrupt``.
    """

    state: AppState
    error: Optional[CorruptDataError] = None
    migrated_from: Optional[str] = None


def _created_at_from_id(habit_id: Any) -> Optional[str]:
    """Early records used a millisecond timestamp as the habit id."""
    text = str(habit_id)
    if not text.isdigit() or len(text) < 12:
        return None
    try:
        return datetime.fromtimestamp(int(text) / 1000).isoformat(timespec="seconds")
    except (OverflowError, OSError, ValueError):
        return None


def upgrade_record(raw: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Bring a stored record up to the current schema version.

    Returns a new dict; ``raw`` is not modified.
    """
    record = dict(raw)
    version = record.get("version", 1)
    if not isinstance(version, int) or isinstance(version, bool):
        version = 1

    if version < 2:
        stamp = (now or datetime.now()).isoformat(timespec="seconds")
        entries = record.get("habits")
        habits = []
        for entry in entries if isinstance(entries, list) else []:
            if isinstance(entry, dict) and not entry.get("createdAt"):
                entry = dict(entry)
                entry["createdAt"] = _created_at_from_id(entry.get("id")) or stamp
            habits.append(entry)
        record["habits"] = habits

    record["version"] = SCHEMA_VERSION
    return record


def merge_with_defaults(raw: Dict[str, Any], now: Optional[datetime] = None) -> AppState:
    """
    Shallow-merge a stored record onto the default state.

    Top-level fields missing from ``raw`` come from the defaults; unknown
    extra fields are kept.
    """
    merged = AppState.default().to_dict()
    for key, value in upgrade_record(raw, now).items():
        if value is not None:
            merged[key] = value
    return AppState.from_dict(merged)


def export_filename(today: Optional[date] = None) -> str:
    return f"{EXPORT_PREFIX}{format_date(today or date.today())}.json"


class PersistenceGateway:
    """Moves AppState in and out of a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = STORAGE_KEY,
        legacy_keys: tuple = LEGACY_KEYS,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.key = key
        self.legacy_keys = legacy_keys
        self.logger = logger or logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------
    def load(self) -> LoadResult:
        """
        Read the state from the store.

        A missing record yields the default state. An unreadable record
        yields the default state plus a CorruptDataError in the result.
        I/O failures of the store itself propagate as StorageError.
        """
        raw_text = self.store.get(self.key)
        if raw_text is not None:
            return self._parse_stored(self.key, raw_text)

        for legacy_key in self.legacy_keys:
            legacy_text = self.store.get(legacy_key)
            if legacy_text is None:
                continue
            result = self._parse_stored(legacy_key, legacy_text)
            if result.error is None and self._migrate_legacy(legacy_key, result.state):
                result.migrated_from = legacy_key
            return result

        self.logger.debug(f"No stored data under '{self.key}', using defaults")
        return LoadResult(state=AppState.default())

    def _parse_stored(self, key: str, raw_text: str) -> LoadResult:
        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            return self._corrupt(key, raw_text, str(exc))
        if not isinstance(data, dict):
            return self._corrupt(key, raw_text, f"expected an object, got {type(data).__name__}")
        for field_name in LIST_FIELDS:
            value = data.get(field_name)
            if value is not None and not isinstance(value, list):
                return self._corrupt(key, raw_text, f"'{field_name}' must be a list, got {type(value).__name__}")
        return LoadResult(state=merge_with_defaults(data))

    def _corrupt(self, key: str, raw_text: str, reason: str) -> LoadResult:
        error = CorruptDataError(key, raw_text, reason)
        self.logger.warning(f"{error}; starting from defaults")
        backup_key = f"{key}{CORRUPT_SUFFIX}"
        try:
            self.store.set(backup_key, raw_text)
            self.logger.info(f"Unreadable data kept under '{backup_key}'")
        except StorageError as exc:
            self.logger.error(f"Could not keep unreadable data under '{backup_key}': {exc}")
        return LoadResult(state=AppState.default(), error=error)

    def _migrate_legacy(self, legacy_key: str, state: AppState) -> bool:
        """Copy a legacy record to the canonical key. The legacy record stays until the copy succeeds."""
        self.logger.info(f"Migrating stored data from '{legacy_key}' to '{self.key}'")
        try:
            self.save(state)
        except StorageError as exc:
            self.logger.warning(f"Could not migrate '{legacy_key}', will retry on next load: {exc}")
            return False
        self.store.delete(legacy_key)
        return True

    def save(self, state: AppState) -> None:
        """
        Write the state under the canonical key.

        Raises:
            QuotaExceededError / StorageUnavailableError when the store
            rejects the write. The caller's in-memory state is untouched.
        """
        payload = json.dumps(state.to_dict(), ensure_ascii=False, separators=(",", ":"))
        self.store.set(self.key, payload)
        self.logger.debug(f"Saved {len(state.habits)} habits under '{self.key}'")

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------
    def export_snapshot(self, state: AppState) -> bytes:
        """Pretty-printed UTF-8 JSON of the full state."""
        return json.dumps(state.to_dict(), ensure_ascii=False, indent=2).encode("utf-8")

    def import_snapshot(self, blob: Union[bytes, str]) -> AppState:
        """
        Parse an exported snapshot and merge it onto the defaults.

        Raises:
            ImportFormatError: if the blob is not JSON, or has no habits list,
                or a habit entry is not an object with an id
        """
        try:
            text = blob.decode("utf-8") if isinstance(blob, (bytes, bytearray)) else blob
            data = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ImportFormatError(f"Snapshot is not valid JSON: {exc}") from exc

        if not isinstance(data, dict) or not isinstance(data.get("habits"), list):
            raise ImportFormatError("Snapshot must be an object with a 'habits' list")
        for index, entry in enumerate(data["habits"]):
            if not isinstance(entry, dict) or "id" not in entry:
                raise ImportFormatError(f"Habit #{index} has no id")

        state = merge_with_defaults(data)
        self.logger.info(f"Imported snapshot with {len(state.habits)} habits")
        return state

    def write_export(
        self,
        state: AppState,
        directory: Optional[Union[str, Path]] = None,
        today: Optional[date] = None,
    ) -> Path:
        """Write an export snapshot into ``directory`` (default: backup dir)."""
        if directory is None:
            from ..core.config import get_backup_dir
            directory = get_backup_dir()
        target = Path(directory).expanduser() / export_filename(today)
        atomic_write(target, self.export_snapshot(state).decode("utf-8"))
        self.logger.info(f"Exported snapshot to {target}")
        return target
