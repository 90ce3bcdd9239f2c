"""Tests for lifesync/hooks.py: hook system."""

import json

import yaml

from lifesync.hooks import attach_hooks, hook_point_for, load_hooks_config, run_hooks
from lifesync.models import TodoChange, TodoItem


def _write_hooks(workspace, config):
    (workspace / "hooks.yaml").write_text(yaml.dump(config), encoding="utf-8")


def test_run_hooks_no_config(workspace):
    """No hooks.yaml -> no hooks run."""
    assert load_hooks_config(workspace) == {}
    results = run_hooks("on_todo_add", {"kind": "add"}, workspace)
    assert results == []


def test_run_hooks_with_echo(workspace):
    """Test hook that echoes context via stdin."""
    _write_hooks(workspace, {"on_todo_add": ["cat"]})

    results = run_hooks("on_todo_add", {"kind": "add", "count": 1}, workspace)
    assert len(results) == 1
    assert results[0]["exit_code"] == 0
    output = json.loads(results[0]["stdout"])
    assert output["count"] == 1


def test_run_hooks_invalid_hook_point(workspace):
    results = run_hooks("pre_finalize", {}, workspace)
    assert results == []


def test_run_hooks_timeout(workspace):
    """Test hook timeout protection."""
    _write_hooks(workspace, {"on_todo_delete": [{"command": "sleep 10", "timeout": 1}]})

    results = run_hooks("on_todo_delete", {}, workspace)
    assert len(results) == 1
    assert results[0]["exit_code"] == -1
    assert "timed out" in results[0].get("error", "").lower()


def test_run_hooks_nonzero_exit(workspace):
    _write_hooks(workspace, {"on_todo_reorder": ["exit 3"]})
    results = run_hooks("on_todo_reorder", {}, workspace)
    assert results[0]["exit_code"] == 3


def test_hook_point_for_toggle():
    done = TodoChange(kind="toggle", item=TodoItem(name="A", is_done=True))
    reopened = TodoChange(kind="toggle", item=TodoItem(name="A", is_done=False))
    assert hook_point_for(done) == "on_todo_done"
    assert hook_point_for(reopened) == "on_todo_reopen"
    assert hook_point_for(TodoChange(kind="add", item=TodoItem())) == "on_todo_add"


def test_attach_hooks_runs_on_store_change(workspace, store):
    out = workspace / "done.log"
    _write_hooks(workspace, {"on_todo_done": [f"cat >> {out}"]})
    unsubscribe = attach_hooks(store, workspace)

    item = store.add("Buy milk", "cart")
    assert not out.exists()
    store.toggle_done(item.id)
    logged = out.read_text(encoding="utf-8")
    payload = json.loads(logged)
    assert payload["kind"] == "toggle"
    assert payload["item"]["name"] == "Buy milk"
    assert payload["item"]["isDone"] is True

    unsubscribe()
    store.toggle_done(item.id)
    store.toggle_done(item.id)
    assert out.read_text(encoding="utf-8") == logged
