#!/usr/bin/env python3
"""LifeSync TUI: interactive terminal to-do list powered by Textual."""

from __future__ import annotations

import sys

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import DataTable, Footer, Header, Input, Label, Select, Static

from lifesync import (
    DEFAULT_ICON,
    TODO_ICONS,
    IndexOutOfRangeError,
    PreferenceStore,
    TodoChange,
    TodoNotFoundError,
    TodoStore,
    attach_hooks,
    load_config,
    setup_logging,
    workspace_root,
)


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#todo-pane {
    height: 1fr;
    padding: 0 1;
}

#todos-table {
    height: 1fr;
}

#add-row {
    height: auto;
    padding: 0 1;
}

#add-input {
    width: 1fr;
}

#icon-select {
    width: 24;
}

#status-bar {
    height: 1;
    color: $text-muted;
    padding: 0 1;
}
"""


# ── Main app ───────────────────────────────────────────────────


class LifeSyncApp(App):
    """LifeSync: to-do list in the terminal."""

    TITLE = "LifeSync"
    CSS = CSS

    BINDINGS = [
        Binding("a", "focus_add", "Add"),
        Binding("space", "toggle_done", "Done"),
        Binding("d", "delete_todo", "Delete"),
        Binding("K", "move_up", "Move up"),
        Binding("J", "move_down", "Move down"),
        Binding("escape", "blur_focus", "Back", show=False),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, store: TodoStore) -> None:
        super().__init__()
        self.store = store
        self._unsubscribe = store.subscribe(self._on_store_change)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(
            Label("Todos", classes="section-title"),
            DataTable(id="todos-table", cursor_type="row"),
            Horizontal(
                Input(placeholder="New todo…", id="add-input"),
                Select(
                    [(icon, icon) for icon in TODO_ICONS],
                    value=DEFAULT_ICON,
                    allow_blank=False,
                    id="icon-select",
                ),
                id="add-row",
            ),
            Static(id="status-bar"),
            id="todo-pane",
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#todos-table", DataTable)
        table.add_columns("", "Icon", "Todo")
        self._refresh_table()
        table.focus()

    def on_unmount(self) -> None:
        self._unsubscribe()

    # ── Rendering ──────────────────────────────────────────────

    def _refresh_table(self, cursor: int | None = None) -> None:
        table = self.query_one("#todos-table", DataTable)
        if cursor is None:
            cursor = table.cursor_row
        table.clear()
        todos = self.store.todos
        for t in todos:
            table.add_row("✓" if t.is_done else " ", t.icon, t.name, key=t.id)
        if todos:
            table.move_cursor(row=max(0, min(cursor, len(todos) - 1)))

        done = sum(1 for t in todos if t.is_done)
        self.sub_title = f"{done}/{len(todos)} done"
        self.query_one("#status-bar", Static).update(
            "a add · space done · d delete · K/J move · q quit"
        )

    def _on_store_change(self, change: TodoChange) -> None:
        cursor = change.to_index if change.kind in {"add", "reorder"} else None
        self._refresh_table(cursor)

    def _selected_id(self) -> str | None:
        todos = self.store.todos
        table = self.query_one("#todos-table", DataTable)
        if not todos or table.cursor_row < 0 or table.cursor_row >= len(todos):
            return None
        return todos[table.cursor_row].id

    # ── Actions ────────────────────────────────────────────────

    def action_focus_add(self) -> None:
        self.query_one("#add-input", Input).focus()

    def action_blur_focus(self) -> None:
        self.query_one("#todos-table", DataTable).focus()

    @on(Input.Submitted, "#add-input")
    def _on_add_submitted(self, event: Input.Submitted) -> None:
        name = event.value.strip()
        if not name:
            return
        icon = self.query_one("#icon-select", Select).value
        self.store.add(name, icon if isinstance(icon, str) else DEFAULT_ICON)
        event.input.value = ""
        self.query_one("#todos-table", DataTable).focus()

    def action_toggle_done(self) -> None:
        todo_id = self._selected_id()
        if todo_id is None:
            return
        try:
            self.store.toggle_done(todo_id)
        except TodoNotFoundError as e:
            self.notify(str(e), severity="warning")

    def action_delete_todo(self) -> None:
        todo_id = self._selected_id()
        if todo_id is None:
            return
        try:
            self.store.delete(todo_id)
        except TodoNotFoundError as e:
            self.notify(str(e), severity="warning")

    def _move(self, offset: int) -> None:
        row = self.query_one("#todos-table", DataTable).cursor_row
        try:
            self.store.reorder(row, row + offset)
        except IndexOutOfRangeError:
            self.bell()

    def action_move_up(self) -> None:
        self._move(-1)

    def action_move_down(self) -> None:
        self._move(1)

    def action_quit_app(self) -> None:
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set LIFESYNC_ROOT or create the directory first.")
        sys.exit(1)

    # Textual owns the terminal; info-level lines would draw over it.
    config = load_config(root)
    setup_logging("WARNING", config.log_format)

    store = TodoStore(PreferenceStore.for_workspace(root))
    attach_hooks(store, root)
    LifeSyncApp(store).run()


if __name__ == "__main__":
    main()
