from __future__ import annotations

import os
import secrets
import threading
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from lifesync import (
    workspace_root as _workspace_root,
    load_config,
    now_local,
    activity_samples_path as _activity_samples_path_fn,
    PreferenceStore,
    TodoStore,
    TODO_ICONS,
    DEFAULT_ICON,
    Coordinate,
    TodoNotFoundError,
    IndexOutOfRangeError,
    StorageReadError,
    attach_hooks,
    load_profile,
    update_profile,
    presence_for_profile,
    FileActivitySource,
    summarize_all,
    setup_logging,
)

from fastapi import FastAPI, Depends, HTTPException, status
from fastapi import Body
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


# ── Store wiring ──────────────────────────────────────────────

_stores: dict[Path, TodoStore] = {}
_stores_lock = threading.Lock()


def get_prefs() -> PreferenceStore:
    return PreferenceStore.for_workspace(_workspace_root())


def get_store() -> TodoStore:
    """One store per workspace root, loaded once for the process lifetime."""
    root = _workspace_root()
    with _stores_lock:
        store = _stores.get(root)
        if store is None:
            store = TodoStore(PreferenceStore.for_workspace(root))
            attach_hooks(store, root)
            _stores[root] = store
        return store


def reset_stores() -> None:
    with _stores_lock:
        _stores.clear()


# ── App ───────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    config = load_config()
    setup_logging(config.log_level, config.log_format)
    yield


app = FastAPI(title="LifeSync", version="0.1.0", lifespan=lifespan)


# ── Auth ──────────────────────────────────────────────────────

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("LIFESYNC_USERNAME", "")
    expected_password = os.environ.get("LIFESYNC_PASSWORD", "")

    if credentials is None:
        if not expected_username or not expected_password:
            return "guest"
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    if not expected_username or not expected_password:
        return "guest"

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(
    username: str = Depends(get_current_user),
    store: TodoStore = Depends(get_store),
    prefs: PreferenceStore = Depends(get_prefs),
) -> HTMLResponse:
    try:
        greeting = load_profile(prefs).name or username
    except StorageReadError:
        greeting = username
    rows = []
    for t in store.todos:
        mark = "&#10003;" if t.is_done else ""
        cls = "done" if t.is_done else ""
        rows.append(
            f'<li class="{cls}"><span class="icon">[{_escape(t.icon)}]</span> '
            f"{_escape(t.name)} {mark}</li>"
        )
    todo_html = "\n".join(rows) if rows else '<li class="muted">(no todos yet)</li>'
    html = f"""<!doctype html>
<html>
<head>
<meta charset="utf-8">
<title>LifeSync</title>
<style>
body {{ font-family: system-ui, sans-serif; margin: 2rem; }}
.done {{ color: #2563eb; }}
.muted {{ color: #888; }}
.icon {{ color: #666; font-size: 0.85em; }}
</style>
</head>
<body>
<h1>Hi {_escape(greeting)},</h1>
<h2>Todos</h2>
<ul>
{todo_html}
</ul>
</body>
</html>
"""
    return HTMLResponse(html)


# ── Todos ─────────────────────────────────────────────────────

@app.get("/api/todos")
def api_list_todos(
    username: str = Depends(get_current_user),
    store: TodoStore = Depends(get_store),
) -> dict[str, Any]:
    todos = store.todos
    return {
        "todos": [t.to_dict() for t in todos],
        "count": len(todos),
        "done": sum(1 for t in todos if t.is_done),
        "icons": list(TODO_ICONS),
    }


@app.post("/api/todos")
def api_create_todo(
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    store: TodoStore = Depends(get_store),
) -> dict[str, Any]:
    """Create a new todo at the end of the list."""
    name = payload.get("name")
    icon = payload.get("icon", DEFAULT_ICON) or DEFAULT_ICON
    if not isinstance(name, str) or not name.strip():
        raise HTTPException(status_code=400, detail="Missing name")
    if not isinstance(icon, str):
        raise HTTPException(status_code=400, detail="icon must be a string")
    item = store.add(name.strip(), icon)
    return {"ok": True, "todo": item.to_dict()}


@app.post("/api/todos/{todo_id}/toggle")
def api_toggle_todo(
    todo_id: str,
    username: str = Depends(get_current_user),
    store: TodoStore = Depends(get_store),
) -> dict[str, Any]:
    try:
        item = store.toggle_done(todo_id)
    except TodoNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"ok": True, "todo": item.to_dict()}


@app.delete("/api/todos/{todo_id}")
def api_delete_todo(
    todo_id: str,
    username: str = Depends(get_current_user),
    store: TodoStore = Depends(get_store),
) -> dict[str, Any]:
    try:
        store.delete(todo_id)
    except TodoNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"ok": True, "todo_id": todo_id}


@app.post("/api/todos/reorder")
def api_reorder_todos(
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    store: TodoStore = Depends(get_store),
) -> dict[str, Any]:
    try:
        from_index = int(payload["from"])
        to_index = int(payload["to"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=400, detail="from and to must be integers")
    try:
        store.reorder(from_index, to_index)
    except IndexOutOfRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "todos": [t.to_dict() for t in store.todos]}


# ── Profile, presence, activity ───────────────────────────────

@app.get("/api/profile")
def api_get_profile(
    username: str = Depends(get_current_user),
    prefs: PreferenceStore = Depends(get_prefs),
) -> dict[str, Any]:
    try:
        return load_profile(prefs).to_dict()
    except StorageReadError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.put("/api/profile")
def api_update_profile(
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    prefs: PreferenceStore = Depends(get_prefs),
) -> dict[str, Any]:
    try:
        profile = update_profile(prefs, payload)
    except StorageReadError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "profile": profile.to_dict()}


@app.post("/api/presence")
def api_presence(
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    prefs: PreferenceStore = Depends(get_prefs),
) -> dict[str, Any]:
    """Distance from the posted coordinate to home and work."""
    try:
        current = Coordinate(float(payload["latitude"]), float(payload["longitude"]))
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid coordinate: {e}")
    config = load_config()
    try:
        profile = load_profile(prefs)
    except StorageReadError as e:
        raise HTTPException(status_code=500, detail=str(e))
    result = presence_for_profile(current, profile, config.presence_radius_km)
    return result.to_dict()


@app.get("/api/activity")
def api_activity(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Steps and distance for today, this month and this year."""
    root = _workspace_root()
    config = load_config(root)
    source = FileActivitySource(_activity_samples_path_fn(root))
    try:
        summaries = summarize_all(source, now_local(root), config.step_goals)
    except StorageReadError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"periods": [s.to_dict() for s in summaries]}
