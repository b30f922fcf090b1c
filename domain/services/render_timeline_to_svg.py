from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, cast

from domain.models import (
    CONNECTION_COLOR,
    AxisPlacement,
    ConnectionRoute,
    EventPlacement,
    LabelPlacement,
    LanePlacement,
    LayoutPlan,
    SvgDocument,
    TimelineSnapshot,
)
from domain.ports.layout import LayoutEngine
from domain.services.render_timeline_base import TimelineRenderer

Element = dict[str, Any]

_SVG_NAMESPACE = "http://www.w3.org/2000/svg"
_FONT_FAMILY = "sans-serif"
_BACKGROUND_COLOR = "#ffffff"
_TITLE_COLOR = "#1f2937"
_TEXT_COLOR = "#1f2937"
_MUTED_TEXT_COLOR = "#6b7280"
_AXIS_COLOR = "#d1d5db"
_ARROW_MARKER_ID = "arrowhead"
_TITLE_FONT_SIZE = 18
_LANE_FONT_SIZE = 11
_EVENT_FONT_SIZE = 10
_CONNECTION_FONT_SIZE = 9
_AXIS_FONT_SIZE = 10
_TICK_HALF_LENGTH = 4.0
_TICK_LABEL_OFFSET = 18.0
_BAR_RADIUS = 4
_BAR_OPACITY = 0.7


def escape_markup(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


@dataclass
class ElementRegistry:
    elements: list[Element] = field(default_factory=list)

    def add(self, tag: str, attrs: dict[str, Any], text: str | None = None) -> Element:
        element: Element = {"tag": tag, "attrs": attrs, "text": text, "children": []}
        self.elements.append(element)
        return element


class TimelineToSvgRenderer(TimelineRenderer):
    media_type = "image/svg+xml"
    extension = "svg"

    def __init__(self, layout_engine: LayoutEngine) -> None:
        super().__init__(layout_engine)
        self._registry = ElementRegistry()

    def render(self, snapshot: TimelineSnapshot) -> SvgDocument:
        return cast(SvgDocument, super().render(snapshot))

    def _render_plan(self, snapshot: TimelineSnapshot, plan: LayoutPlan) -> SvgDocument:
        self._registry = ElementRegistry()
        width = plan.canvas.width
        height = plan.canvas.height
        self._registry.add("rect", {"width": width, "height": height, "fill": _BACKGROUND_COLOR})
        self._registry.add(
            "text",
            {
                "x": width / 2,
                "y": plan.header_height / 2 + _TITLE_FONT_SIZE / 3,
                "font-family": _FONT_FAMILY,
                "font-size": _TITLE_FONT_SIZE,
                "font-weight": "bold",
                "text-anchor": "middle",
                "fill": _TITLE_COLOR,
            },
            snapshot.timeline.title,
        )
        self._build_arrow_marker()
        self._draw_timeline(plan)

        root: Element = {
            "tag": "svg",
            "attrs": {
                "xmlns": _SVG_NAMESPACE,
                "viewBox": f"0 0 {format_number(width)} {format_number(height)}",
                "width": width,
                "height": height,
            },
            "text": None,
            "children": self._registry.elements,
        }
        return SvgDocument(markup=self._serialize(root), size=plan.canvas)

    def _build_arrow_marker(self) -> None:
        defs = self._registry.add("defs", {})
        marker: Element = {
            "tag": "marker",
            "attrs": {
                "id": _ARROW_MARKER_ID,
                "markerWidth": 8,
                "markerHeight": 6,
                "refX": 8,
                "refY": 3,
                "orient": "auto",
            },
            "text": None,
            "children": [
                {
                    "tag": "path",
                    "attrs": {"d": "M0,0 L8,3 L0,6 Z", "fill": CONNECTION_COLOR},
                    "text": None,
                    "children": [],
                }
            ],
        }
        defs["children"].append(marker)

    def _draw_lane(self, lane: LanePlacement) -> None:
        self._registry.add(
            "rect",
            {
                "x": lane.origin.x,
                "y": lane.origin.y,
                "width": lane.size.width,
                "height": lane.size.height,
                "fill": lane.tint,
            },
        )
        self._registry.add(
            "text",
            {
                "x": lane.label_position.x,
                "y": lane.label_position.y,
                "font-family": _FONT_FAMILY,
                "font-size": _LANE_FONT_SIZE,
                "fill": _MUTED_TEXT_COLOR,
            },
            lane.name,
        )

    def _draw_bar(self, placement: EventPlacement) -> None:
        self._registry.add(
            "rect",
            {
                "x": placement.x,
                "y": placement.center_y - placement.height / 2,
                "width": placement.width,
                "height": placement.height,
                "rx": _BAR_RADIUS,
                "ry": _BAR_RADIUS,
                "fill": placement.color,
                "opacity": _BAR_OPACITY,
            },
        )

    def _draw_marker(self, placement: EventPlacement) -> None:
        self._registry.add(
            "circle",
            {
                "cx": placement.x,
                "cy": placement.center_y,
                "r": placement.width / 2,
                "fill": placement.color,
            },
        )

    def _draw_label(self, label: LabelPlacement, role: str) -> None:
        connection = role == "connection"
        self._registry.add(
            "text",
            {
                "x": label.position.x,
                "y": label.position.y,
                "font-family": _FONT_FAMILY,
                "font-size": _CONNECTION_FONT_SIZE if connection else _EVENT_FONT_SIZE,
                "text-anchor": label.anchor,
                "fill": CONNECTION_COLOR if connection else _TEXT_COLOR,
            },
            label.text,
        )

    def _draw_connection(self, route: ConnectionRoute) -> None:
        path = (
            f"M{format_number(route.start.x)},{format_number(route.start.y)} "
            f"Q{format_number(route.control.x)},{format_number(route.control.y)} "
            f"{format_number(route.end.x)},{format_number(route.end.y)}"
        )
        self._registry.add(
            "path",
            {
                "d": path,
                "fill": "none",
                "stroke": route.color,
                "stroke-width": 1.5,
                "marker-end": f"url(#{_ARROW_MARKER_ID})",
            },
        )

    def _draw_axis(self, axis: AxisPlacement) -> None:
        line_style = {"stroke": _AXIS_COLOR, "stroke-width": 1}
        self._registry.add(
            "line",
            {"x1": axis.start.x, "y1": axis.start.y, "x2": axis.end.x, "y2": axis.end.y, **line_style},
        )
        for tick in axis.ticks:
            self._registry.add(
                "line",
                {
                    "x1": tick.x,
                    "y1": axis.start.y - _TICK_HALF_LENGTH,
                    "x2": tick.x,
                    "y2": axis.start.y + _TICK_HALF_LENGTH,
                    **line_style,
                },
            )
            self._registry.add(
                "text",
                {
                    "x": tick.x,
                    "y": axis.start.y + _TICK_LABEL_OFFSET,
                    "font-family": _FONT_FAMILY,
                    "font-size": _AXIS_FONT_SIZE,
                    "text-anchor": "middle",
                    "fill": _MUTED_TEXT_COLOR,
                },
                tick.label,
            )

    def _serialize(self, element: Element) -> str:
        tag = element["tag"]
        attrs = "".join(
            f' {key}="{escape_markup(self._format_attr(value))}"'
            for key, value in element["attrs"].items()
        )
        children = element.get("children") or []
        text = element.get("text")
        if children:
            inner = "".join(self._serialize(child) for child in children)
        elif text is not None:
            inner = escape_markup(text)
        else:
            return f"<{tag}{attrs}/>"
        return f"<{tag}{attrs}>{inner}</{tag}>"

    def _format_attr(self, value: Any) -> str:
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, (int, float)):
            return format_number(value)
        return str(value)
