"""Step and distance statistics for the day, month and year.

Aggregation itself belongs to the health data source; this module only picks
the date ranges, asks the source for cumulative sums and scores them against
the configured step goals.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Protocol

from lifesync.errors import StorageReadError
from lifesync.fileio import read_json
from lifesync.models import DEFAULT_STEP_GOALS, ActivitySample, ActivitySummary

PERIODS = ("day", "month", "year")
KINDS = ("steps", "distance")


class ActivitySource(Protocol):
    def cumulative_sum(self, kind: str, start: datetime, end: datetime) -> float:
        """Sum of samples of ``kind`` starting in [start, end). Distance in meters."""
        ...


def period_start(period: str, now: datetime) -> datetime:
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "day":
        return midnight
    if period == "month":
        return midnight.replace(day=1)
    if period == "year":
        return midnight.replace(month=1, day=1)
    raise ValueError(f"Unknown period: {period}")


def period_range(period: str, now: datetime) -> tuple[datetime, datetime]:
    return period_start(period, now), now


class FileActivitySource:
    """Samples exported from a health store into samples.json."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._samples: list[ActivitySample] | None = None

    def samples(self) -> list[ActivitySample]:
        if self._samples is None:
            try:
                data = read_json(self.path)
            except (OSError, json.JSONDecodeError) as e:
                raise StorageReadError(f"Cannot read activity samples at {self.path}: {e}") from e
            raw = data.get("samples", []) if isinstance(data, dict) else []
            self._samples = [ActivitySample.from_dict(s) for s in raw if isinstance(s, dict)]
        return self._samples

    def cumulative_sum(self, kind: str, start: datetime, end: datetime) -> float:
        total = 0.0
        for sample in self.samples():
            if sample.kind != kind:
                continue
            try:
                sample_start = datetime.fromisoformat(sample.start)
            except ValueError:
                continue
            if sample_start.tzinfo is None and start.tzinfo is not None:
                sample_start = sample_start.replace(tzinfo=start.tzinfo)
            elif sample_start.tzinfo is not None and start.tzinfo is None:
                sample_start = sample_start.replace(tzinfo=None)
            if start <= sample_start < end:
                total += sample.value
        return total


def summarize(
    source: ActivitySource,
    period: str,
    now: datetime,
    goals: dict[str, int] | None = None,
) -> ActivitySummary:
    goals = goals or DEFAULT_STEP_GOALS
    start, end = period_range(period, now)
    steps = source.cumulative_sum("steps", start, end)
    meters = source.cumulative_sum("distance", start, end)
    return ActivitySummary(
        period=period,
        start=start.isoformat(timespec="seconds"),
        end=end.isoformat(timespec="seconds"),
        steps=int(steps),
        distance_km=meters / 1000.0,
        goal=int(goals.get(period, 0)),
    )


def summarize_all(
    source: ActivitySource,
    now: datetime,
    goals: dict[str, int] | None = None,
) -> list[ActivitySummary]:
    return [summarize(source, period, now, goals) for period in PERIODS]
