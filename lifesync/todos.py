"""To-do list store with write-through persistence for LifeSync.

The whole list lives under one preference key as a serialized JSON document.
Every successful mutation rewrites that document, then notifies subscribers.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Callable, Iterator
from dataclasses import replace
from typing import Any

import structlog

from lifesync.errors import (
    IndexOutOfRangeError,
    StorageReadError,
    StorageWriteError,
    StoreStateError,
    TodoNotFoundError,
)
from lifesync.models import DEFAULT_ICON, TodoChange, TodoItem
from lifesync.prefs import PreferenceStore

log = structlog.get_logger()

TODOS_KEY = "todos"
SCHEMA_VERSION = 1

TodoListener = Callable[[TodoChange], None]


# ── Serialization ─────────────────────────────────────────────


def encode_todos(todos: list[TodoItem]) -> str:
    """Serialize the full list as a versioned JSON document."""
    return json.dumps(
        {"version": SCHEMA_VERSION, "todos": [t.to_dict() for t in todos]},
        ensure_ascii=False,
    )


def decode_todos(raw: Any) -> list[TodoItem]:
    """Decode a stored document. Raises StorageReadError on anything malformed.

    Accepts the versioned object form and the unversioned bare array.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="strict")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Stored todos are not valid JSON: {e}") from e

    if isinstance(raw, list):
        entries = raw
    elif isinstance(raw, dict):
        version = raw.get("version")
        if not isinstance(version, int) or version > SCHEMA_VERSION:
            raise StorageReadError(f"Unsupported todos schema version: {version!r}")
        entries = raw.get("todos")
        if not isinstance(entries, list):
            raise StorageReadError("Stored todos document has no todos array")
    else:
        raise StorageReadError(f"Unexpected stored todos type: {type(raw).__name__}")

    todos = []
    seen: set[str] = set()
    for entry in entries:
        try:
            item = TodoItem.from_dict(entry)
        except ValueError as e:
            raise StorageReadError(str(e)) from e
        if item.id in seen:
            raise StorageReadError(f"Duplicate todo id: {item.id}")
        seen.add(item.id)
        todos.append(item)
    return todos


# ── Store ─────────────────────────────────────────────────────


class TodoStore:
    """Authoritative in-memory to-do list backed by a preference store.

    Two states: uninitialized until ``load()`` has run once, ready after.
    The constructor loads immediately unless ``autoload=False``.
    Mutations hold a lock across mutate, persist and notify.
    """

    def __init__(
        self,
        prefs: PreferenceStore,
        key: str = TODOS_KEY,
        autoload: bool = True,
    ) -> None:
        self._prefs = prefs
        self._key = key
        self._todos: list[TodoItem] = []
        self._listeners: list[TodoListener] = []
        self._lock = threading.RLock()
        self._ready = False
        if autoload:
            self.load()

    # ── Lifecycle ─────────────────────────────────────────────

    @property
    def ready(self) -> bool:
        return self._ready

    def load(self) -> list[TodoItem]:
        """Read the persisted list once. Unreadable data yields an empty list."""
        with self._lock:
            if self._ready:
                raise StoreStateError("Todo store is already loaded")
            try:
                raw = self._prefs.get(self._key)
                todos = [] if raw is None else decode_todos(raw)
            except StorageReadError as e:
                log.warning("todos.load_failed", key=self._key, error=str(e))
                todos = []
            self._todos = todos
            self._ready = True
            log.debug("todos.loaded", key=self._key, count=len(todos))
            return list(todos)

    def _require_ready(self) -> None:
        if not self._ready:
            raise StoreStateError("Todo store has not been loaded")

    # ── Reads ─────────────────────────────────────────────────

    @property
    def todos(self) -> list[TodoItem]:
        """Snapshot of the current list, in display order."""
        with self._lock:
            return [replace(t) for t in self._todos]

    def get(self, todo_id: str) -> TodoItem:
        with self._lock:
            return replace(self._todos[self._index_of(todo_id)])

    def __len__(self) -> int:
        return len(self._todos)

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(self.todos)

    def _index_of(self, todo_id: str) -> int:
        for i, t in enumerate(self._todos):
            if t.id == todo_id:
                return i
        raise TodoNotFoundError(todo_id)

    # ── Mutations ─────────────────────────────────────────────

    def add(self, name: str, icon: str = DEFAULT_ICON) -> TodoItem:
        """Append a new, not-done item and persist."""
        with self._lock:
            self._require_ready()
            item = TodoItem(name=name, icon=icon)
            self._todos.append(item)
            self._commit(TodoChange(kind="add", item=replace(item), to_index=len(self._todos) - 1))
            return replace(item)

    def toggle_done(self, todo_id: str) -> TodoItem:
        """Flip the done flag of one item and persist."""
        with self._lock:
            self._require_ready()
            index = self._index_of(todo_id)
            item = self._todos[index]
            item.is_done = not item.is_done
            self._commit(TodoChange(kind="toggle", item=replace(item), from_index=index, to_index=index))
            return replace(item)

    def delete(self, todo_id: str) -> TodoItem:
        """Remove one item, keeping the order of the rest, and persist."""
        with self._lock:
            self._require_ready()
            index = self._index_of(todo_id)
            item = self._todos.pop(index)
            self._commit(TodoChange(kind="delete", item=replace(item), from_index=index))
            return replace(item)

    def reorder(self, from_index: int, to_index: int) -> None:
        """Move the item at from_index so it ends up at to_index.

        to_index may equal the list length, meaning "move to the end".
        """
        with self._lock:
            self._require_ready()
            length = len(self._todos)
            if not 0 <= from_index < length:
                raise IndexOutOfRangeError(from_index, length)
            if not 0 <= to_index <= length:
                raise IndexOutOfRangeError(to_index, length, allow_end=True)
            item = self._todos.pop(from_index)
            self._todos.insert(to_index, item)
            final_index = min(to_index, length - 1)
            self._commit(
                TodoChange(kind="reorder", item=replace(item), from_index=from_index, to_index=final_index)
            )

    # ── Persistence & notification ────────────────────────────

    def _commit(self, change: TodoChange) -> None:
        self._persist()
        change.todos = self.todos
        log.info("todos.changed", **change.to_dict())
        self._notify(change)

    def _persist(self) -> None:
        payload = encode_todos(self._todos)
        for attempt in (1, 2):
            try:
                self._prefs.set(self._key, payload)
                return
            except (StorageReadError, StorageWriteError) as e:
                if attempt == 1:
                    log.warning("todos.persist_retry", key=self._key, error=str(e))
                else:
                    log.error("todos.persist_failed", key=self._key, error=str(e))

    # ── Subscriptions ─────────────────────────────────────────

    def subscribe(self, listener: TodoListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, change: TodoChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                log.exception("todos.listener_failed", kind=change.kind, listener=repr(listener))
