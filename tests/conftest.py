"""Shared test fixtures for LifeSync tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml

from lifesync.prefs import PreferenceStore
from lifesync.todos import TodoStore


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with config, prefs and health samples."""
    root = tmp_path / "workspace"
    (root / "health").mkdir(parents=True)

    # Config
    config = {
        "timezone": "UTC",
        "log_level": "DEBUG",
        "log_format": "console",
        "presence_radius_km": 1.0,
        "step_goals": {"day": 10000, "month": 304000, "year": 3650000},
    }
    (root / "config.yaml").write_text(
        yaml.dump(config, default_flow_style=False), encoding="utf-8"
    )

    # Preferences (profile only; todos start absent)
    prefs = {
        "name": "Frank",
        "firstName": "Oscar",
        "email": "oscar@example.com",
        "homeAddress": "1 Rue de Rivoli, Paris",
        "workAddress": "Place de la Défense, Puteaux",
        "homeLocation": {"latitude": 48.8606, "longitude": 2.3376},
        "workLocation": {"latitude": 48.8918, "longitude": 2.2361},
    }
    (root / "prefs.json").write_text(json.dumps(prefs, indent=2), encoding="utf-8")

    # Health samples
    samples = {
        "samples": [
            {"kind": "steps", "start": "2026-02-11T08:00:00+00:00", "end": "2026-02-11T09:00:00+00:00", "value": 3200},
            {"kind": "steps", "start": "2026-02-11T17:30:00+00:00", "end": "2026-02-11T18:00:00+00:00", "value": 1800},
            {"kind": "distance", "start": "2026-02-11T08:00:00+00:00", "end": "2026-02-11T09:00:00+00:00", "value": 2500},
            {"kind": "steps", "start": "2026-02-03T10:00:00+00:00", "end": "2026-02-03T11:00:00+00:00", "value": 6000},
            {"kind": "distance", "start": "2026-02-03T10:00:00+00:00", "end": "2026-02-03T11:00:00+00:00", "value": 4500},
            {"kind": "steps", "start": "2026-01-20T10:00:00+00:00", "end": "2026-01-20T11:00:00+00:00", "value": 9000},
            {"kind": "steps", "start": "2025-12-31T10:00:00+00:00", "end": "2025-12-31T11:00:00+00:00", "value": 7777},
        ]
    }
    (root / "health" / "samples.json").write_text(
        json.dumps(samples, indent=2), encoding="utf-8"
    )

    # Set env var
    os.environ["LIFESYNC_ROOT"] = str(root)
    yield root
    # Cleanup
    if "LIFESYNC_ROOT" in os.environ:
        del os.environ["LIFESYNC_ROOT"]


@pytest.fixture
def prefs(workspace: Path) -> PreferenceStore:
    return PreferenceStore.for_workspace(workspace)


@pytest.fixture
def store(prefs: PreferenceStore) -> TodoStore:
    return TodoStore(prefs)
