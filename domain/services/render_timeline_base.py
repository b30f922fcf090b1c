from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from domain.models import (
    AxisPlacement,
    ConnectionRoute,
    EventPlacement,
    GlyphKind,
    LabelPlacement,
    LanePlacement,
    LayoutPlan,
    TimelineSnapshot,
)
from domain.ports.layout import LayoutEngine


class TimelineRenderer(ABC):
    """Translate a shared :class:`LayoutPlan` into one output format.

    Subclasses own the drawing surface and implement the draw hooks; the
    geometry always comes from the layout engine.
    """

    media_type: str = "application/octet-stream"
    extension: str = "bin"

    def __init__(self, layout_engine: LayoutEngine) -> None:
        self.layout_engine = layout_engine

    def render(self, snapshot: TimelineSnapshot) -> Any:
        plan = self.layout_engine.build_plan(snapshot)
        return self._render_plan(snapshot, plan)

    @abstractmethod
    def _render_plan(self, snapshot: TimelineSnapshot, plan: LayoutPlan) -> Any:
        raise NotImplementedError

    def _draw_timeline(self, plan: LayoutPlan) -> None:
        for lane in plan.lanes:
            self._draw_lane(lane)
        for placement in plan.events:
            if placement.kind is GlyphKind.BAR:
                self._draw_bar(placement)
            else:
                self._draw_marker(placement)
            self._draw_label(placement.label, role="event")
        for route in plan.connections:
            self._draw_connection(route)
            if route.label is not None:
                self._draw_label(route.label, role="connection")
        self._draw_axis(plan.axis)

    @abstractmethod
    def _draw_lane(self, lane: LanePlacement) -> None:
        raise NotImplementedError

    @abstractmethod
    def _draw_bar(self, placement: EventPlacement) -> None:
        raise NotImplementedError

    @abstractmethod
    def _draw_marker(self, placement: EventPlacement) -> None:
        raise NotImplementedError

    @abstractmethod
    def _draw_label(self, label: LabelPlacement, role: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def _draw_connection(self, route: ConnectionRoute) -> None:
        raise NotImplementedError

    @abstractmethod
    def _draw_axis(self, axis: AxisPlacement) -> None:
        raise NotImplementedError
