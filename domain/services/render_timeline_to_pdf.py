from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence, cast

from fpdf import FPDF
from fpdf.errors import FPDFException

from domain.errors import RenderEncodingError
from domain.models import (
    AxisPlacement,
    ConnectionRoute,
    EventPlacement,
    LabelPlacement,
    LanePlacement,
    LayoutPlan,
    PageWindow,
    PdfDocument,
    Point,
    TimelineSnapshot,
)
from domain.ports.layout import LayoutEngine
from domain.services.colors import hex_to_rgb, rgb_to_bytes
from domain.services.date_coordinates import to_epoch_days
from domain.services.pagination import split_pages
from domain.services.render_timeline_base import TimelineRenderer

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_CHARS = 200
_CORE_FONT = "helvetica"
_CUSTOM_FONT = "timeline"
_CORE_FONT_ENCODING = "latin-1"
_TEXT_DARK = (26, 26, 26)
_TEXT_MUTED = (102, 102, 102)
_TEXT_SOFT = (77, 77, 77)
_AXIS_COLOR = (179, 179, 179)
_CONNECTION_COLOR = (156, 163, 175)
_AXIS_LINE_WIDTH = 0.5
_CONNECTION_LINE_WIDTH = 0.3
_TICK_HALF_LENGTH = 1.5
_TICK_LABEL_OFFSET = 4.0
_PAGE_HEADER_OFFSET = 10.0
_COVER_LEFT = 50.0
_CURVE_SEGMENTS = 16


def truncate_description(text: str, limit: int = DESCRIPTION_MAX_CHARS) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


class TimelineToPdfRenderer(TimelineRenderer):
    """Cover page followed by the timeline split across landscape pages."""

    media_type = "application/pdf"
    extension = "pdf"

    def __init__(self, layout_engine: LayoutEngine, font_path: Path | None = None) -> None:
        super().__init__(layout_engine)
        self.font_path = font_path
        self._pdf: FPDF | None = None

    def render(self, snapshot: TimelineSnapshot) -> PdfDocument:
        return cast(PdfDocument, super().render(snapshot))

    def page_plans(self, snapshot: TimelineSnapshot) -> list[tuple[PageWindow, LayoutPlan]]:
        full_plan = self.layout_engine.build_plan(snapshot)
        return self._page_plans(snapshot, full_plan)

    def _page_plans(
        self, snapshot: TimelineSnapshot, full_plan: LayoutPlan
    ) -> list[tuple[PageWindow, LayoutPlan]]:
        pages = split_pages(full_plan.window, full_plan.usable_width, full_plan.scale)
        logger.debug("Timeline %s spans %d page(s)", snapshot.timeline.id, len(pages))
        return [
            (page, self.layout_engine.build_plan(snapshot, window=page.window)) for page in pages
        ]

    def _render_plan(self, snapshot: TimelineSnapshot, plan: LayoutPlan) -> PdfDocument:
        try:
            pdf = self._new_document(snapshot, plan)
            self._pdf = pdf
            self._build_cover(snapshot)
            for page, page_plan in self._page_plans(snapshot, plan):
                pdf.add_page()
                self._set_font(8)
                pdf.set_text_color(*_TEXT_MUTED)
                pdf.text(plan.axis.start.x, _PAGE_HEADER_OFFSET, page.label)
                self._draw_timeline(page_plan)
            content = bytes(pdf.output())
            page_count = pdf.page_no()
        except FPDFException as exc:
            msg = f"PDF generation error: {exc}"
            raise RenderEncodingError(msg) from exc
        finally:
            self._pdf = None
        return PdfDocument(content=content, page_count=page_count)

    def _new_document(self, snapshot: TimelineSnapshot, plan: LayoutPlan) -> FPDF:
        pdf = FPDF(unit="mm", format=(plan.canvas.width, plan.canvas.height))
        pdf.set_auto_page_break(auto=False)
        pdf.set_margins(0, 0, 0)
        pdf.set_title(self._safe_text(snapshot.timeline.title))
        if self.font_path is not None:
            try:
                pdf.add_font(_CUSTOM_FONT, "", str(self.font_path))
            except Exception as exc:  # noqa: BLE001
                msg = f"Failed to add font {self.font_path}: {exc}"
                raise RenderEncodingError(msg) from exc
        return pdf

    def _build_cover(self, snapshot: TimelineSnapshot) -> None:
        pdf = self._surface()
        pdf.add_page()
        self._set_font(24, bold=True)
        pdf.set_text_color(*_TEXT_DARK)
        pdf.text(_COVER_LEFT, pdf.h - 140.0, self._safe_text(snapshot.timeline.title))

        self._set_font(12)
        pdf.set_text_color(*_TEXT_MUTED)
        pdf.text(_COVER_LEFT, pdf.h - 125.0, self._safe_text(self.date_range_summary(snapshot)))

        self._set_font(10)
        pdf.text(
            _COVER_LEFT,
            pdf.h - 115.0,
            f"{len(snapshot.events)} events across {len(snapshot.tracks)} tracks",
        )

        description = snapshot.timeline.description
        if description:
            self._set_font(9)
            pdf.set_text_color(*_TEXT_SOFT)
            pdf.text(_COVER_LEFT, pdf.h - 100.0, self._safe_text(truncate_description(description)))

    @staticmethod
    def date_range_summary(snapshot: TimelineSnapshot) -> str:
        earliest: tuple[float, str] | None = None
        latest: tuple[float, str] | None = None
        for event in snapshot.events:
            start = to_epoch_days(event.start_date)
            if start is None:
                continue
            end = to_epoch_days(event.end_date)
            end_value, end_text = (start, event.start_date) if end is None else (end, event.end_date or "")
            if earliest is None or start < earliest[0]:
                earliest = (start, event.start_date)
            if latest is None or end_value > latest[0]:
                latest = (end_value, end_text)
        if earliest is None or latest is None:
            return "N/A to N/A"
        return f"{earliest[1]} to {latest[1]}"

    def _draw_lane(self, lane: LanePlacement) -> None:
        pdf = self._surface()
        pdf.set_fill_color(*rgb_to_bytes(hex_to_rgb(lane.tint)))
        pdf.rect(lane.origin.x, lane.origin.y, lane.size.width, lane.size.height, style="F")
        self._set_font(7)
        pdf.set_text_color(*_TEXT_SOFT)
        pdf.text(lane.label_position.x, lane.label_position.y, self._safe_text(lane.name))

    def _draw_bar(self, placement: EventPlacement) -> None:
        pdf = self._surface()
        pdf.set_fill_color(*rgb_to_bytes(hex_to_rgb(placement.color)))
        pdf.rect(
            placement.x,
            placement.center_y - placement.height / 2,
            placement.width,
            placement.height,
            style="F",
        )

    def _draw_marker(self, placement: EventPlacement) -> None:
        pdf = self._surface()
        radius = placement.width / 2
        pdf.set_fill_color(*rgb_to_bytes(hex_to_rgb(placement.color)))
        pdf.ellipse(
            placement.x - radius,
            placement.center_y - radius,
            placement.width,
            placement.height,
            style="F",
        )

    def _draw_label(self, label: LabelPlacement, role: str) -> None:
        pdf = self._surface()
        self._set_font(5 if role == "connection" else 6)
        if role == "connection":
            pdf.set_text_color(*_CONNECTION_COLOR)
        else:
            pdf.set_text_color(*_TEXT_DARK)
        text = self._safe_text(label.text)
        x = label.position.x
        if label.anchor == "middle":
            x -= pdf.get_string_width(text) / 2
        pdf.text(x, label.position.y, text)

    def _draw_connection(self, route: ConnectionRoute) -> None:
        pdf = self._surface()
        pdf.set_draw_color(*rgb_to_bytes(hex_to_rgb(route.color)))
        pdf.set_fill_color(*rgb_to_bytes(hex_to_rgb(route.color)))
        pdf.set_line_width(_CONNECTION_LINE_WIDTH)
        pdf.polyline(self._points(route.sample(_CURVE_SEGMENTS)))
        pdf.polygon(self._points(route.arrow_head), style="F")

    def _draw_axis(self, axis: AxisPlacement) -> None:
        pdf = self._surface()
        pdf.set_draw_color(*_AXIS_COLOR)
        pdf.set_line_width(_AXIS_LINE_WIDTH)
        pdf.line(axis.start.x, axis.start.y, axis.end.x, axis.end.y)
        self._set_font(7)
        pdf.set_text_color(*_TEXT_MUTED)
        for tick in axis.ticks:
            pdf.line(tick.x, axis.start.y - _TICK_HALF_LENGTH, tick.x, axis.start.y + _TICK_HALF_LENGTH)
            label_width = pdf.get_string_width(tick.label)
            pdf.text(tick.x - label_width / 2, axis.start.y + _TICK_LABEL_OFFSET, tick.label)

    def _surface(self) -> FPDF:
        if self._pdf is None:
            msg = "No PDF document is being rendered"
            raise RuntimeError(msg)
        return self._pdf

    def _set_font(self, size: float, bold: bool = False) -> None:
        pdf = self._surface()
        if self.font_path is not None:
            pdf.set_font(_CUSTOM_FONT, "", size)
        else:
            pdf.set_font(_CORE_FONT, "B" if bold else "", size)

    def _safe_text(self, text: str) -> str:
        # Core PDF fonts only cover latin-1.
        if self.font_path is not None:
            return text
        return text.encode(_CORE_FONT_ENCODING, "replace").decode(_CORE_FONT_ENCODING)

    @staticmethod
    def _points(points: Sequence[Point]) -> list[tuple[float, float]]:
        return [(point.x, point.y) for point in points]
