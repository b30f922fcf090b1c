from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from adapters.filesystem.timeline_source import FileSystemTimelineSource
from domain.models import EventType, TimelineSnapshot
from tests.helpers.timeline_fixtures import make_snapshot, range_event


def test_saved_snapshot_loads_back(tmp_path: Path) -> None:
    source = FileSystemTimelineSource(tmp_path / "timelines")
    snapshot = make_snapshot(
        timeline_id="wars",
        title="Wars",
        tracks=[{"id": "a", "name": "Europe", "color": "#aa0000"}],
        events=[range_event("e1", "1914-07-28", "1918-11-11", event_type="era")],
        connections=[{"source_event_id": "e1", "target_event_id": "e1", "label": "self"}],
    )

    path = source.save(snapshot)

    assert path == tmp_path / "timelines" / "wars.json"
    assert b'"startDate"' in path.read_bytes()
    assert source.get("wars") == snapshot
    assert source.list_ids() == ["wars"]


def test_camel_case_fixture_is_accepted(sample_snapshot: TimelineSnapshot) -> None:
    assert sample_snapshot.timeline.id == "computing-history"
    assert [track.id for track in sample_snapshot.tracks] == ["hardware", "software", "eras"]
    assert sample_snapshot.events[0].event_type is EventType.ERA
    assert sample_snapshot.connections[0].source_event_id == "unix"


@pytest.mark.parametrize("timeline_id", ["missing", "", "../secrets", ".hidden", "a/b"])
def test_unknown_or_unsafe_ids_return_none(tmp_path: Path, timeline_id: str) -> None:
    source = FileSystemTimelineSource(tmp_path)

    assert source.get(timeline_id) is None


def test_missing_directory_lists_nothing(tmp_path: Path) -> None:
    assert FileSystemTimelineSource(tmp_path / "nowhere").list_ids() == []


def test_invalid_snapshot_raises_validation_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text('{"timeline": {"title": "no id"}}')

    with pytest.raises(ValidationError):
        FileSystemTimelineSource(tmp_path).get("broken")


def test_unrecognized_event_type_does_not_reject_snapshot(tmp_path: Path) -> None:
    path = tmp_path / "mixed.json"
    path.write_text(
        '{"timeline": {"id": "mixed"}, "events": ['
        '{"id": "e1", "startDate": "2001-01-01", "eventType": "task"},'
        '{"id": "e2", "startDate": "2001-02-01", "eventType": "era"}]}'
    )

    snapshot = FileSystemTimelineSource(tmp_path).get("mixed")

    assert snapshot is not None
    assert [event.event_type for event in snapshot.events] == [EventType.POINT, EventType.ERA]
