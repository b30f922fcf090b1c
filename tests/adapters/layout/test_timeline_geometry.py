from __future__ import annotations

import pytest

from adapters.layout.timeline import LayoutConfig, TimelineLayoutEngine, tick_year, truncate_label
from domain.models import CoordinateWindow, EventType, GlyphKind, Size
from tests.helpers.timeline_fixtures import make_snapshot, point_event, range_event

TRACKS = [
    {"id": "a", "name": "Alpha", "color": "#2563eb"},
    {"id": "b", "name": "Beta", "color": "#16a34a"},
]


def _engine() -> TimelineLayoutEngine:
    return TimelineLayoutEngine(LayoutConfig.vector())


def test_empty_timeline_uses_default_window_and_minimum_canvas() -> None:
    plan = _engine().build_plan(make_snapshot())

    assert plan.window == CoordinateWindow(0.0, 100.0)
    assert plan.canvas == Size(600.0, 200.0)
    assert plan.lanes == []
    assert plan.events == []
    assert [tick.label for tick in plan.axis.ticks] == ["1970"]
    assert plan.axis.ticks[0].x == pytest.approx(20.0)


def test_single_event_window_is_padded() -> None:
    snapshot = make_snapshot(tracks=TRACKS, events=[point_event("e1", "1970-01-01")])

    plan = _engine().build_plan(snapshot)

    assert plan.window == CoordinateWindow(-50.0, 50.0)
    placement = plan.placement_for("e1")
    assert placement is not None
    assert placement.x == pytest.approx(20.0 + 50 * 0.5)


def test_marker_geometry_is_centered_in_its_lane() -> None:
    snapshot = make_snapshot(
        tracks=TRACKS,
        events=[
            point_event("e1", "1970-01-01", track_id="a"),
            point_event("e2", "1970-04-11", track_id="b", event_type="milestone"),
        ],
    )

    plan = _engine().build_plan(snapshot)
    first = plan.placement_for("e1")
    second = plan.placement_for("e2")

    assert first is not None and second is not None
    assert first.kind is GlyphKind.MARKER
    assert second.kind is GlyphKind.MARKER
    assert (first.x, first.center_y) == (20.0, 70.0)
    assert (second.x, second.center_y) == (70.0, 130.0)
    assert first.width == first.height == 12.0
    assert first.label.position.x == first.x
    assert first.label.position.y == pytest.approx(70.0 - 6.0 - 4.0)
    assert second.label.position.y == pytest.approx(130.0 - 6.0 - 4.0)


def test_bar_width_follows_duration_with_minimum() -> None:
    snapshot = make_snapshot(
        tracks=TRACKS,
        events=[
            range_event("long", "1970-01-01", "1970-01-21"),
            range_event("open", "1970-02-01", None, event_type="era"),
            range_event("bad-end", "1970-03-01", "someday"),
            point_event("anchor", "1970-04-11"),
        ],
    )

    plan = _engine().build_plan(snapshot)
    long_bar = plan.placement_for("long")
    open_bar = plan.placement_for("open")
    bad_end = plan.placement_for("bad-end")

    assert long_bar is not None and open_bar is not None and bad_end is not None
    assert long_bar.kind is GlyphKind.BAR
    assert long_bar.width == pytest.approx(10.0)
    assert long_bar.height == 20.0
    assert long_bar.label.position.x == pytest.approx(long_bar.x + 5.0)
    assert long_bar.label.position.y == pytest.approx(70.0 - 10.0 - 4.0)
    assert open_bar.width == pytest.approx(4.0)
    assert bad_end.width == pytest.approx(4.0)


def test_unknown_track_and_unparseable_start() -> None:
    snapshot = make_snapshot(
        tracks=TRACKS,
        events=[
            point_event("orphan", "1970-01-10", track_id="ghost"),
            point_event("undated", "circa 1970"),
            point_event("other", "1970-02-10", track_id="b"),
        ],
    )

    plan = _engine().build_plan(snapshot)

    orphan = plan.placement_for("orphan")
    assert orphan is not None
    assert orphan.lane_index == 0
    assert orphan.color == "#2563eb"
    assert plan.placement_for("undated") is None
    assert len(plan.events) == 2


def test_event_color_overrides_track_color() -> None:
    snapshot = make_snapshot(
        tracks=TRACKS,
        events=[
            point_event("custom", "1970-01-01", color="#ABCDEF"),
            point_event("broken", "1970-01-05", color="blue"),
        ],
    )

    plan = _engine().build_plan(snapshot)

    assert plan.placement_for("custom").color == "#abcdef"  # type: ignore[union-attr]
    assert plan.placement_for("broken").color == "#2563eb"  # type: ignore[union-attr]


def test_bars_are_painted_before_markers() -> None:
    snapshot = make_snapshot(
        tracks=TRACKS,
        events=[
            point_event("milestone", "1970-01-05", event_type="milestone"),
            point_event("point", "1970-01-06"),
            range_event("range", "1970-01-01", "1970-02-01"),
            range_event("era", "1970-01-01", "1970-03-01", event_type="era"),
        ],
    )

    plan = _engine().build_plan(snapshot)

    assert [placement.event_type for placement in plan.events] == [
        EventType.ERA,
        EventType.RANGE,
        EventType.POINT,
        EventType.MILESTONE,
    ]


def test_lanes_are_tinted_track_bands() -> None:
    plan = _engine().build_plan(make_snapshot(tracks=[{"id": "a", "name": "Alpha", "color": "#000000"}]))

    lane = plan.lanes[0]
    assert lane.tint == "#d9d9d9"
    assert lane.origin.y == 40.0
    assert lane.size == Size(600.0, 60.0)
    assert lane.label_position.x == 5.0


def test_events_outside_window_are_skipped_and_clamped() -> None:
    snapshot = make_snapshot(
        tracks=TRACKS,
        events=[
            point_event("before", "1970-01-01"),
            range_event("spanning", "1970-01-01", "1970-12-31"),
        ],
    )

    plan = _engine().build_plan(snapshot, window=CoordinateWindow(100.0, 200.0))

    assert plan.placement_for("before") is None
    spanning = plan.placement_for("spanning")
    assert spanning is not None
    assert spanning.x == pytest.approx(20.0)


def test_truncate_label_and_tick_year() -> None:
    assert truncate_label("a" * 30) == "a" * 30
    assert truncate_label("b" * 31) == "b" * 27 + "..."
    assert tick_year(0) == "1970"
    assert tick_year(365 * 30) == "2000"


def test_reversed_range_is_still_placed() -> None:
    snapshot = make_snapshot(
        tracks=TRACKS,
        events=[
            point_event("p", "1970-01-01"),
            range_event("r", "1980-01-01", "1960-01-01"),
        ],
    )

    plan = _engine().build_plan(snapshot)

    assert {placement.event_id for placement in plan.events} == {"p", "r"}
    reversed_bar = plan.placement_for("r")
    assert reversed_bar is not None
    assert reversed_bar.width == pytest.approx(4.0)


def test_unknown_event_type_is_drawn_as_point() -> None:
    snapshot = make_snapshot(
        tracks=TRACKS,
        events=[point_event("task", "1970-01-01", event_type="task")],
    )

    assert snapshot.events[0].event_type is EventType.POINT
    placement = _engine().build_plan(snapshot).placement_for("task")
    assert placement is not None
    assert placement.kind is GlyphKind.MARKER
