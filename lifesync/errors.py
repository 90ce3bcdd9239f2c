"""Error taxonomy for LifeSync.

Lookup and range errors reach the caller. Storage errors are raised by the
preference store and absorbed by TodoStore (empty list on read, log on write).
"""

from __future__ import annotations


class LifeSyncError(Exception):
    """Base class for all LifeSync errors."""


class StorageReadError(LifeSyncError):
    """Persisted data is unreadable or cannot be decoded."""


class StorageWriteError(LifeSyncError):
    """Persisting data to the preference store failed."""


class TodoNotFoundError(LifeSyncError, LookupError):
    def __init__(self, todo_id: str) -> None:
        super().__init__(f"Todo not found: {todo_id}")
        self.todo_id = todo_id


class IndexOutOfRangeError(LifeSyncError, IndexError):
    def __init__(self, index: int, length: int, *, allow_end: bool = False) -> None:
        upper = length if allow_end else length - 1
        super().__init__(f"Index {index} out of range [0, {upper}] for list of length {length}")
        self.index = index
        self.length = length


class StoreStateError(LifeSyncError, RuntimeError):
    """Operation is not valid in the store's current state."""
