from __future__ import annotations

import math

from domain.models import (
    CONNECTION_COLOR,
    Connection,
    ConnectionRoute,
    EventPlacement,
    LabelPlacement,
    Point,
)
from domain.services.colors import normalize_hex


def route_connection(
    connection: Connection,
    source: EventPlacement,
    target: EventPlacement,
    control_offset: float,
    arrow_size: float,
    label_gap: float,
) -> ConnectionRoute:
    start = source.anchor
    end = target.anchor
    control = Point((start.x + end.x) / 2, min(start.y, end.y) - control_offset)
    label = None
    if connection.label:
        label = LabelPlacement(connection.label, Point(control.x, control.y - label_gap))
    return ConnectionRoute(
        source_event_id=connection.source_event_id,
        target_event_id=connection.target_event_id,
        start=start,
        control=control,
        end=end,
        arrow_head=_arrow_head(control, end, arrow_size),
        color=normalize_hex(connection.color, CONNECTION_COLOR),
        label=label,
    )


def _arrow_head(control: Point, tip: Point, size: float) -> tuple[Point, Point, Point]:
    # The tangent of a quadratic curve at its end points from the control point to the tip.
    dx = tip.x - control.x
    dy = tip.y - control.y
    length = math.hypot(dx, dy)
    if length == 0:
        dx, dy, length = 1.0, 0.0, 1.0
    ux, uy = dx / length, dy / length
    base_x = tip.x - ux * size
    base_y = tip.y - uy * size
    half = size * 0.375
    return (
        Point(base_x - uy * half, base_y + ux * half),
        tip,
        Point(base_x + uy * half, base_y - ux * half),
    )
