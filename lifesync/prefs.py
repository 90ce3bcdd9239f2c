"""Local key-value preference store.

One JSON object on disk, rewritten atomically on every set/remove. Values are
anything JSON can hold; the to-do list lives under a single key as a
serialized string.

Every store instance for the same file shares one lock, so a read-modify-write
from one instance never drops a key written by another in the same process.
"""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any

import structlog

from lifesync.errors import StorageReadError, StorageWriteError
from lifesync.fileio import read_json, write_json_atomic
from lifesync.workspace import prefs_path

log = structlog.get_logger()

_path_locks: dict[Path, threading.RLock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _path_locks_guard:
        lock = _path_locks.get(key)
        if lock is None:
            lock = _path_locks[key] = threading.RLock()
        return lock


class _CorruptPreferences(StorageReadError):
    """The file exists and is readable but does not hold a JSON object."""


class PreferenceStore:
    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = _lock_for(path)

    @classmethod
    def for_workspace(cls, root: Path | None = None) -> PreferenceStore:
        return cls(prefs_path(root))

    def _read_all(self) -> dict[str, Any]:
        try:
            data = read_json(self.path)
        except OSError as e:
            raise StorageReadError(f"Cannot read preferences at {self.path}: {e}") from e
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise _CorruptPreferences(f"Cannot read preferences at {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise _CorruptPreferences(f"Preferences at {self.path} are not a JSON object")
        return data

    def _read_for_write(self) -> dict[str, Any]:
        """Current contents, or an empty object after moving a corrupt file aside."""
        try:
            return self._read_all()
        except _CorruptPreferences as e:
            backup = self.path.with_name(self.path.name + ".corrupt")
            try:
                os.replace(self.path, backup)
            except OSError as move_error:
                raise StorageWriteError(
                    f"Cannot move corrupt preferences at {self.path} aside: {move_error}"
                ) from move_error
            log.warning("prefs.corrupt_reset", path=str(self.path), backup=str(backup), error=str(e))
            return {}

    def _write_all(self, data: dict[str, Any]) -> None:
        try:
            write_json_atomic(self.path, data)
        except (OSError, TypeError, ValueError) as e:
            raise StorageWriteError(f"Cannot write preferences at {self.path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read_all().get(key, default)

    def get_string(self, key: str, default: str = "") -> str:
        value = self.get(key)
        return value if isinstance(value, str) else default

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read_for_write()
            data[key] = value
            self._write_all(data)
        log.debug("prefs.set", key=key, path=str(self.path))

    def update(self, values: dict[str, Any]) -> None:
        """Set several keys in one write."""
        with self._lock:
            data = self._read_for_write()
            data.update(values)
            self._write_all(data)

    def remove(self, key: str) -> bool:
        with self._lock:
            data = self._read_for_write()
            if key not in data:
                return False
            del data[key]
            self._write_all(data)
            return True

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._read_all().keys())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._read_all()
