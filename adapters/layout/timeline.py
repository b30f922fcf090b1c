from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from adapters.layout.lanes import LaneAssigner
from adapters.layout.routing import route_connection
from domain.models import (
    LABEL_ELLIPSIS,
    LABEL_MAX_CHARS,
    NEUTRAL_GRAY,
    AxisPlacement,
    AxisTick,
    Connection,
    ConnectionRoute,
    CoordinateWindow,
    Event,
    EventPlacement,
    EventType,
    GlyphKind,
    LabelPlacement,
    LanePlacement,
    LayoutPlan,
    Point,
    Size,
    TimelineSnapshot,
)
from domain.ports.layout import LayoutEngine
from domain.services.colors import is_hex_color, normalize_hex, tint
from domain.services.date_coordinates import to_epoch_days
from domain.services.timeline_extent import compute_extent

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25
EPOCH_YEAR = 1970
PAINT_ORDER = {
    EventType.ERA: 0,
    EventType.RANGE: 1,
    EventType.POINT: 2,
    EventType.MILESTONE: 3,
}


@dataclass(frozen=True)
class LayoutConfig:
    scale: float = 0.5  # canvas units per day
    margin_x: float = 20.0
    padding_y: float = 20.0
    header_height: float = 40.0
    lane_height: float = 60.0
    lane_inset: float = 0.0
    lane_label_offset: Point = Point(5.0, 14.0)
    axis_offset: float = 10.0
    axis_height: float = 40.0
    tick_interval_days: float = 365.0
    marker_radius: float = 6.0
    bar_height: float = 20.0
    min_bar_width: float = 4.0
    label_gap: float = 4.0
    control_offset: float = 30.0
    arrow_size: float = 8.0
    min_canvas: Size = Size(600.0, 200.0)
    page_size: Optional[Size] = None

    @classmethod
    def vector(cls) -> LayoutConfig:
        return cls()

    @classmethod
    def document(cls) -> LayoutConfig:
        # Millimetres on a landscape Letter page.
        return cls(
            scale=0.15,
            margin_x=20.0,
            padding_y=0.0,
            header_height=15.0,
            lane_height=18.0,
            lane_inset=20.0,
            lane_label_offset=Point(1.0, 4.0),
            axis_offset=5.0,
            axis_height=0.0,
            marker_radius=1.5,
            bar_height=5.0,
            min_bar_width=1.0,
            label_gap=1.5,
            control_offset=9.0,
            arrow_size=2.5,
            min_canvas=Size(0.0, 0.0),
            page_size=Size(279.4, 215.9),
        )


@dataclass(frozen=True)
class ResolvedEvent:
    event: Event
    start: float
    end: Optional[float]

    @property
    def effective_end(self) -> float:
        return self.start if self.end is None else self.end

    @property
    def span(self) -> tuple[float, float]:
        end = self.effective_end
        return (min(self.start, end), max(self.start, end))


def truncate_label(text: str, limit: int = LABEL_MAX_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(LABEL_ELLIPSIS)] + LABEL_ELLIPSIS


def tick_year(day: float) -> str:
    return str(int(round(EPOCH_YEAR + day / DAYS_PER_YEAR)))


class TimelineLayoutEngine(LayoutEngine):
    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def build_plan(
        self, snapshot: TimelineSnapshot, window: CoordinateWindow | None = None
    ) -> LayoutPlan:
        resolved = self.resolve_events(snapshot.events)
        if window is None:
            window = compute_extent(
                (item.start for item in resolved),
                (item.end for item in resolved if item.end is not None),
            )
        lanes = LaneAssigner(snapshot.tracks)
        canvas = self._canvas_size(window, lanes.lane_count)
        usable_width = max(canvas.width - 2 * self.config.margin_x, 0.0)

        placements = self._place_events(resolved, lanes, window, usable_width)
        return LayoutPlan(
            window=window,
            scale=self.config.scale,
            usable_width=usable_width,
            canvas=canvas,
            header_height=self.config.header_height,
            lanes=self._build_lanes(lanes, canvas),
            events=placements,
            connections=self._route_connections(snapshot.connections, placements),
            axis=self._build_axis(window, canvas, lanes.lane_count),
        )

    def resolve_events(self, events: Sequence[Event]) -> List[ResolvedEvent]:
        resolved: List[ResolvedEvent] = []
        for event in events:
            start = to_epoch_days(event.start_date)
            if start is None:
                logger.debug("Skipping event %s: unparseable start date %r", event.id, event.start_date)
                continue
            resolved.append(ResolvedEvent(event, start, to_epoch_days(event.end_date)))
        return resolved

    def _canvas_size(self, window: CoordinateWindow, lane_count: int) -> Size:
        cfg = self.config
        if cfg.page_size is not None:
            return cfg.page_size
        content_width = window.width * cfg.scale + cfg.margin_x * 2
        content_height = (
            cfg.header_height + lane_count * cfg.lane_height + cfg.axis_height + cfg.padding_y * 2
        )
        return Size(
            max(content_width, cfg.min_canvas.width),
            max(content_height, cfg.min_canvas.height),
        )

    def _build_lanes(self, lanes: LaneAssigner, canvas: Size) -> List[LanePlacement]:
        cfg = self.config
        placements: List[LanePlacement] = []
        for idx, track in enumerate(lanes.tracks):
            origin = Point(cfg.lane_inset, cfg.header_height + idx * cfg.lane_height)
            placements.append(
                LanePlacement(
                    track_id=track.id,
                    name=track.name,
                    index=idx,
                    origin=origin,
                    size=Size(canvas.width - cfg.lane_inset * 2, cfg.lane_height),
                    color=normalize_hex(track.color),
                    tint=tint(track.color),
                    label_position=Point(
                        origin.x + cfg.lane_label_offset.x, origin.y + cfg.lane_label_offset.y
                    ),
                )
            )
        return placements

    def _place_events(
        self,
        resolved: Sequence[ResolvedEvent],
        lanes: LaneAssigner,
        window: CoordinateWindow,
        usable_width: float,
    ) -> List[EventPlacement]:
        cfg = self.config
        placements: List[EventPlacement] = []
        for item in resolved:
            event = item.event
            if not window.overlaps(*item.span):
                continue
            lane_index = lanes.lane_index(event.track_id)
            center_y = cfg.header_height + lane_index * cfg.lane_height + cfg.lane_height / 2
            x = self._to_x(item.start, window, usable_width)
            color = self._event_color(event, lanes, lane_index)
            title = truncate_label(event.title)

            if event.glyph_kind is GlyphKind.BAR:
                x_end = self._to_x(item.effective_end, window, usable_width)
                width = max(x_end - x, cfg.min_bar_width)
                bar_top = center_y - cfg.bar_height / 2
                placement = EventPlacement(
                    event_id=event.id,
                    event_type=event.event_type,
                    kind=GlyphKind.BAR,
                    lane_index=lane_index,
                    x=x,
                    center_y=center_y,
                    width=width,
                    height=cfg.bar_height,
                    color=color,
                    label=LabelPlacement(title, Point(x + width / 2, bar_top - cfg.label_gap)),
                )
            else:
                diameter = cfg.marker_radius * 2
                placement = EventPlacement(
                    event_id=event.id,
                    event_type=event.event_type,
                    kind=GlyphKind.MARKER,
                    lane_index=lane_index,
                    x=x,
                    center_y=center_y,
                    width=diameter,
                    height=diameter,
                    color=color,
                    label=LabelPlacement(
                        title, Point(x, center_y - cfg.marker_radius - cfg.label_gap)
                    ),
                )
            placements.append(placement)
        placements.sort(key=lambda placement: PAINT_ORDER[placement.event_type])
        return placements

    def _route_connections(
        self, connections: Sequence[Connection], placements: Sequence[EventPlacement]
    ) -> List[ConnectionRoute]:
        cfg = self.config
        by_id: Dict[str, EventPlacement] = {placement.event_id: placement for placement in placements}
        routes: List[ConnectionRoute] = []
        for connection in connections:
            source = by_id.get(connection.source_event_id)
            target = by_id.get(connection.target_event_id)
            if source is None or target is None:
                logger.debug(
                    "Dropping connection %s -> %s: endpoint not placed",
                    connection.source_event_id,
                    connection.target_event_id,
                )
                continue
            routes.append(
                route_connection(
                    connection,
                    source,
                    target,
                    control_offset=cfg.control_offset,
                    arrow_size=cfg.arrow_size,
                    label_gap=cfg.label_gap,
                )
            )
        return routes

    def _build_axis(self, window: CoordinateWindow, canvas: Size, lane_count: int) -> AxisPlacement:
        cfg = self.config
        axis_y = cfg.header_height + lane_count * cfg.lane_height + cfg.axis_offset
        left = cfg.margin_x
        right = canvas.width - cfg.margin_x
        ticks: List[AxisTick] = []
        step = math.ceil(window.start / cfg.tick_interval_days)
        while step * cfg.tick_interval_days <= window.end:
            day = step * cfg.tick_interval_days
            x = left + (day - window.start) * cfg.scale
            if left <= x <= right:
                ticks.append(AxisTick(day=day, x=x, label=tick_year(day)))
            step += 1
        return AxisPlacement(start=Point(left, axis_y), end=Point(right, axis_y), ticks=ticks)

    def _to_x(self, coordinate: float, window: CoordinateWindow, usable_width: float) -> float:
        offset = (coordinate - window.start) * self.config.scale
        return self.config.margin_x + min(max(offset, 0.0), usable_width)

    def _event_color(self, event: Event, lanes: LaneAssigner, lane_index: int) -> str:
        if is_hex_color(event.color):
            return normalize_hex(event.color)
        track = lanes.track_at(lane_index)
        return normalize_hex(track.color) if track else NEUTRAL_GRAY
