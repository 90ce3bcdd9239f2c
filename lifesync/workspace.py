"""Workspace root, config, timezone, path helpers for LifeSync."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from lifesync.fileio import read_yaml
from lifesync.models import AppConfig


def workspace_root() -> Path:
    """Get the workspace root directory (holds prefs.json and config.yaml)."""
    return Path(
        os.environ.get("LIFESYNC_ROOT", str(Path.home() / "lifesync"))
    ).expanduser().resolve()


def load_config(root: Path | None = None) -> AppConfig:
    """Load config.yaml into an AppConfig, defaults for anything missing."""
    return AppConfig.from_dict(read_yaml(config_path(root)))


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from config.yaml, defaulting to UTC."""
    try:
        return ZoneInfo(load_config(root).timezone)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in user's timezone."""
    return datetime.now(get_user_timezone(root))


# ── Path helpers ──────────────────────────────────────────────

def prefs_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "prefs.json"


def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "config.yaml"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "hooks.yaml"


def activity_samples_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "health" / "samples.json"
