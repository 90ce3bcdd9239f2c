"""Typed dataclasses for LifeSync data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


# ── Todos ─────────────────────────────────────────────────────


TODO_ICONS = ("list.bullet", "phone", "message", "bell", "star", "calendar")
DEFAULT_ICON = "list.bullet"


def new_todo_id() -> str:
    return str(uuid.uuid4())


@dataclass
class TodoItem:
    """A single to-do entry. Only ``is_done`` changes after creation."""

    id: str = field(default_factory=new_todo_id)
    name: str = ""
    icon: str = DEFAULT_ICON
    is_done: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TodoItem:
        """Strict decode of a stored item. Raises ValueError on bad shape."""
        if not isinstance(d, dict):
            raise ValueError(f"Todo entry must be an object, got {type(d).__name__}")
        todo_id = d.get("id")
        name = d.get("name")
        icon = d.get("icon")
        is_done = d.get("isDone")
        if not isinstance(todo_id, str) or not todo_id:
            raise ValueError("Todo entry has no id")
        if not isinstance(name, str):
            raise ValueError(f"Todo {todo_id} has no name")
        if not isinstance(icon, str):
            raise ValueError(f"Todo {todo_id} has no icon")
        if not isinstance(is_done, bool):
            raise ValueError(f"Todo {todo_id} has no isDone flag")
        return cls(id=todo_id, name=name, icon=icon, is_done=is_done)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "icon": self.icon, "isDone": self.is_done}

    @property
    def has_known_icon(self) -> bool:
        return self.icon in TODO_ICONS


@dataclass
class TodoChange:
    """Notification emitted after a successful store mutation."""

    kind: str  # add, toggle, delete, reorder
    item: TodoItem
    todos: list[TodoItem] = field(default_factory=list)
    from_index: int | None = None
    to_index: int | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "kind": self.kind,
            "item": self.item.to_dict(),
            "count": len(self.todos),
        }
        if self.from_index is not None:
            d["fromIndex"] = self.from_index
        if self.to_index is not None:
            d["toIndex"] = self.to_index
        return d


# ── Config ────────────────────────────────────────────────────


DEFAULT_STEP_GOALS = {"day": 10000, "month": 304000, "year": 3650000}


@dataclass
class AppConfig:
    timezone: str = "UTC"
    log_level: str = "INFO"
    log_format: str = "console"  # console, json
    presence_radius_km: float = 1.0
    step_goals: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_STEP_GOALS))

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AppConfig:
        if not d or not isinstance(d, dict):
            return cls()
        goals = dict(DEFAULT_STEP_GOALS)
        raw_goals = d.get("step_goals")
        if isinstance(raw_goals, dict):
            for period, value in raw_goals.items():
                if period in goals:
                    goals[period] = int(value)
        log_format = str(d.get("log_format", "console")).strip().lower()
        if log_format not in {"console", "json"}:
            log_format = "console"
        return cls(
            timezone=str(d.get("timezone", "UTC")),
            log_level=str(d.get("log_level", "INFO")).upper(),
            log_format=log_format,
            presence_radius_km=float(d.get("presence_radius_km", 1.0)),
            step_goals=goals,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "presence_radius_km": self.presence_radius_km,
            "step_goals": dict(self.step_goals),
        }


# ── Profile & location ────────────────────────────────────────


@dataclass
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> Coordinate | None:
        if not d or not isinstance(d, dict):
            return None
        if "latitude" not in d or "longitude" not in d:
            return None
        return cls(latitude=float(d["latitude"]), longitude=float(d["longitude"]))

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass
class Profile:
    name: str = ""
    first_name: str = ""
    email: str = ""
    home_address: str = ""
    work_address: str = ""
    home_location: Coordinate | None = None
    work_location: Coordinate | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Profile:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            name=str(d.get("name", "") or ""),
            first_name=str(d.get("firstName", "") or ""),
            email=str(d.get("email", "") or ""),
            home_address=str(d.get("homeAddress", "") or ""),
            work_address=str(d.get("workAddress", "") or ""),
            home_location=Coordinate.from_dict(d.get("homeLocation")),
            work_location=Coordinate.from_dict(d.get("workLocation")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "firstName": self.first_name,
            "email": self.email,
            "homeAddress": self.home_address,
            "workAddress": self.work_address,
            "homeLocation": self.home_location.to_dict() if self.home_location else None,
            "workLocation": self.work_location.to_dict() if self.work_location else None,
        }


@dataclass
class PlaceDistance:
    place: str
    distance_km: float | None = None
    at_place: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "place": self.place,
            "distanceKm": round(self.distance_km, 3) if self.distance_km is not None else None,
            "atPlace": self.at_place,
        }


@dataclass
class Presence:
    home: PlaceDistance
    work: PlaceDistance

    def to_dict(self) -> dict[str, Any]:
        return {"home": self.home.to_dict(), "work": self.work.to_dict()}


# ── Activity ──────────────────────────────────────────────────


@dataclass
class ActivitySample:
    kind: str  # steps, distance
    start: str  # ISO datetime
    end: str
    value: float = 0.0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ActivitySample:
        return cls(
            kind=str(d.get("kind", "")),
            start=str(d.get("start", "")),
            end=str(d.get("end", d.get("start", ""))),
            value=float(d.get("value", 0.0)),
        )


@dataclass
class ActivitySummary:
    period: str = "day"  # day, month, year
    start: str = ""
    end: str = ""
    steps: int = 0
    distance_km: float = 0.0
    goal: int = 0

    @property
    def goal_pct(self) -> float:
        if self.goal <= 0:
            return 0.0
        return self.steps / self.goal * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period,
            "start": self.start,
            "end": self.end,
            "steps": self.steps,
            "distanceKm": round(self.distance_km, 2),
            "goal": self.goal,
            "goalPct": round(self.goal_pct, 1),
        }
