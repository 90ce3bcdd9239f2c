"""LifeSync core library: to-do store, profile, presence and activity.

Public API re-exports for convenient imports:
    from lifesync import TodoStore, PreferenceStore, workspace_root, ...
"""

# Workspace & config
from lifesync.workspace import (
    workspace_root,
    load_config,
    get_user_timezone,
    now_local,
    prefs_path,
    config_path,
    hooks_config_path,
    activity_samples_path,
)

# File I/O
from lifesync.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_json_atomic,
)

# Errors
from lifesync.errors import (
    LifeSyncError,
    StorageReadError,
    StorageWriteError,
    TodoNotFoundError,
    IndexOutOfRangeError,
    StoreStateError,
)

# Models
from lifesync.models import (
    TODO_ICONS,
    DEFAULT_ICON,
    TodoItem,
    TodoChange,
    AppConfig,
    Coordinate,
    Profile,
    PlaceDistance,
    Presence,
    ActivitySample,
    ActivitySummary,
)

# Preferences & todos
from lifesync.prefs import PreferenceStore
from lifesync.todos import TodoStore, encode_todos, decode_todos, TODOS_KEY

# Hooks
from lifesync.hooks import run_hooks, attach_hooks, load_hooks_config

# Profile, location, activity
from lifesync.profile import load_profile, save_profile, update_profile, set_place_location
from lifesync.location import distance_km, presence, presence_for_profile, format_distance
from lifesync.activity import FileActivitySource, period_range, summarize, summarize_all

# Logging
from lifesync.logging_config import setup_logging
