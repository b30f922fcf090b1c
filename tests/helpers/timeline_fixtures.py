from __future__ import annotations

from functools import cache, lru_cache
from pathlib import Path
from typing import Any

import orjson

from domain.models import Connection, Event, Timeline, TimelineSnapshot, Track


@lru_cache(maxsize=1)
def repo_root() -> Path:
    for parent in Path(__file__).resolve().parents:
        if (parent / "pyproject.toml").exists():
            return parent
    raise RuntimeError("Repository root not found")


@cache
def _load_timeline_cached(name: str) -> TimelineSnapshot:
    fixture_path = repo_root() / "data" / "timelines" / name
    return TimelineSnapshot.model_validate(orjson.loads(fixture_path.read_bytes()))


def load_timeline_fixture(name: str) -> TimelineSnapshot:
    return _load_timeline_cached(name).model_copy(deep=True)


def make_snapshot(
    *,
    timeline_id: str = "t1",
    title: str = "Test Timeline",
    description: str = "",
    tracks: list[dict[str, Any]] | None = None,
    events: list[dict[str, Any]] | None = None,
    connections: list[dict[str, Any]] | None = None,
) -> TimelineSnapshot:
    return TimelineSnapshot(
        timeline=Timeline(id=timeline_id, title=title, description=description),
        tracks=[Track.model_validate({"timeline_id": timeline_id, **item}) for item in tracks or []],
        events=[Event.model_validate(item) for item in events or []],
        connections=[Connection.model_validate(item) for item in connections or []],
    )


def point_event(event_id: str, start_date: str, track_id: str = "a", **extra: Any) -> dict[str, Any]:
    return {
        "id": event_id,
        "track_id": track_id,
        "title": extra.pop("title", event_id.upper()),
        "start_date": start_date,
        "event_type": extra.pop("event_type", "point"),
        **extra,
    }


def range_event(
    event_id: str,
    start_date: str,
    end_date: str | None,
    track_id: str = "a",
    **extra: Any,
) -> dict[str, Any]:
    return point_event(
        event_id,
        start_date,
        track_id,
        end_date=end_date,
        event_type=extra.pop("event_type", "range"),
        **extra,
    )
