"""Tests for lifesync/profile.py and lifesync/workspace.py."""

import threading

import pytest
from zoneinfo import ZoneInfo

from lifesync.models import Coordinate
from lifesync.prefs import PreferenceStore
from lifesync.profile import load_profile, save_profile, set_place_location, update_profile
from lifesync.todos import TodoStore
from lifesync.workspace import get_user_timezone, load_config, prefs_path, workspace_root


def test_load_profile(prefs):
    profile = load_profile(prefs)
    assert profile.name == "Frank"
    assert profile.first_name == "Oscar"
    assert profile.home_location == Coordinate(48.8606, 2.3376)


def test_load_profile_empty(tmp_path):
    profile = load_profile(PreferenceStore(tmp_path / "prefs.json"))
    assert profile.name == ""
    assert profile.home_location is None


def test_update_profile_keeps_todos(prefs):
    prefs.set("todos", "[]")
    profile = update_profile(prefs, {"email": "new@example.com", "unknown": "ignored"})
    assert profile.email == "new@example.com"
    assert prefs.get("todos") == "[]"
    assert "unknown" not in prefs
    assert load_profile(prefs).email == "new@example.com"


def test_update_profile_bad_coordinate(prefs):
    with pytest.raises(ValueError):
        update_profile(prefs, {"workLocation": {"latitude": 123, "longitude": 0}})
    assert load_profile(prefs).work_location == Coordinate(48.8918, 2.2361)


def test_set_place_location(prefs):
    profile = set_place_location(prefs, "work", Coordinate(45.0, 5.0))
    assert profile.work_location == Coordinate(45.0, 5.0)
    assert load_profile(prefs).work_location == Coordinate(45.0, 5.0)
    set_place_location(prefs, "home", None)
    assert load_profile(prefs).home_location is None
    with pytest.raises(ValueError):
        set_place_location(prefs, "gym", None)


def test_save_profile_round_trip(prefs):
    profile = load_profile(prefs)
    profile.home_address = "Elsewhere"
    save_profile(prefs, profile)
    assert load_profile(prefs) == profile


def test_workspace_paths(workspace):
    assert workspace_root() == workspace.resolve()
    assert prefs_path(workspace) == workspace / "prefs.json"


def test_load_config(workspace):
    config = load_config(workspace)
    assert config.log_level == "DEBUG"
    assert config.step_goals["month"] == 304000


def test_timezone_fallback(workspace):
    (workspace / "config.yaml").write_text("timezone: Not/AZone\n", encoding="utf-8")
    assert get_user_timezone(workspace) == ZoneInfo("UTC")


def test_profile_writes_do_not_drop_todos(workspace):
    store = TodoStore(PreferenceStore.for_workspace(workspace))
    stop = threading.Event()

    def edit_profile():
        prefs = PreferenceStore.for_workspace(workspace)
        i = 0
        while not stop.is_set():
            update_profile(prefs, {"workAddress": f"Desk {i}"})
            i += 1

    editor = threading.Thread(target=edit_profile)
    editor.start()
    try:
        for i in range(200):
            store.add(f"Item {i}")
    finally:
        stop.set()
        editor.join()
    reloaded = TodoStore(PreferenceStore.for_workspace(workspace)).todos
    assert len(reloaded) == 200
