"""Plugin/hook system for LifeSync.

Hooks run shell commands whenever the to-do list changes.
Configured via hooks.yaml in the workspace root.

Hook points:
- on_todo_add
- on_todo_done, on_todo_reopen
- on_todo_delete
- on_todo_reorder
"""

from __future__ import annotations

import json
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from lifesync.fileio import read_yaml
from lifesync.models import TodoChange
from lifesync.workspace import hooks_config_path, workspace_root

if TYPE_CHECKING:
    from lifesync.todos import TodoStore

log = structlog.get_logger()


VALID_HOOK_POINTS = {
    "on_todo_add",
    "on_todo_done",
    "on_todo_reopen",
    "on_todo_delete",
    "on_todo_reorder",
}

DEFAULT_TIMEOUT = 30


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    """Load hooks configuration from hooks.yaml."""
    if root is None:
        root = workspace_root()
    path = hooks_config_path(root)
    if not path.exists():
        return {}
    return read_yaml(path)


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run all hooks registered for a given hook point.

    Context is passed as JSON via stdin to each hook subprocess.
    Returns list of results with stdout/stderr and exit codes.
    """
    if hook_point not in VALID_HOOK_POINTS:
        return []

    if root is None:
        root = workspace_root()

    config = load_hooks_config(root)
    hooks = config.get(hook_point, [])

    if not hooks or not isinstance(hooks, list):
        return []

    results = []
    context_json = json.dumps(context, ensure_ascii=False)

    for hook in hooks:
        if isinstance(hook, str):
            command = hook
            timeout = DEFAULT_TIMEOUT
        elif isinstance(hook, dict):
            command = hook.get("command", "")
            timeout = hook.get("timeout", DEFAULT_TIMEOUT)
        else:
            continue

        if not command:
            continue

        result: dict[str, Any] = {"command": command, "hook_point": hook_point}
        try:
            proc = subprocess.run(
                command,
                shell=True,
                input=context_json,
                capture_output=True,
                text=True,
                timeout=timeout,
                cwd=str(root),
            )
            result["exit_code"] = proc.returncode
            result["stdout"] = proc.stdout[:4096]  # Cap output
            result["stderr"] = proc.stderr[:4096]
        except subprocess.TimeoutExpired:
            result["exit_code"] = -1
            result["error"] = f"Hook timed out after {timeout}s"
        except OSError as e:
            result["exit_code"] = -1
            result["error"] = str(e)

        if result["exit_code"] != 0:
            log.warning("hooks.failed", hook_point=hook_point, command=command, exit_code=result["exit_code"])
        results.append(result)

    return results


def hook_point_for(change: TodoChange) -> str:
    if change.kind == "toggle":
        return "on_todo_done" if change.item.is_done else "on_todo_reopen"
    return f"on_todo_{change.kind}"


def attach_hooks(store: TodoStore, root: Path | None = None) -> Callable[[], None]:
    """Subscribe a listener that runs the configured hooks for every change.

    Returns the unsubscribe callable.
    """
    def _on_change(change: TodoChange) -> None:
        run_hooks(hook_point_for(change), change.to_dict(), root)

    return store.subscribe(_on_change)
