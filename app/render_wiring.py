from __future__ import annotations

from adapters.filesystem.timeline_source import FileSystemTimelineSource
from adapters.layout.timeline import TimelineLayoutEngine
from app.config import AppSettings
from domain.models import ExportFormat
from domain.ports.repositories import TimelineSource
from domain.services.export_timeline import ExportTimeline
from domain.services.render_timeline_base import TimelineRenderer
from domain.services.render_timeline_to_pdf import TimelineToPdfRenderer
from domain.services.render_timeline_to_svg import TimelineToSvgRenderer


def build_timeline_source(settings: AppSettings) -> FileSystemTimelineSource:
    return FileSystemTimelineSource(settings.storage.data_dir)


def build_renderers(settings: AppSettings) -> dict[ExportFormat, TimelineRenderer]:
    return {
        ExportFormat.SVG: TimelineToSvgRenderer(
            TimelineLayoutEngine(settings.svg.to_layout_config())
        ),
        ExportFormat.PDF: TimelineToPdfRenderer(
            TimelineLayoutEngine(settings.pdf.to_layout_config()),
            font_path=settings.pdf.font_path,
        ),
    }


def build_export_service(
    settings: AppSettings, source: TimelineSource | None = None
) -> ExportTimeline:
    return ExportTimeline(source or build_timeline_source(settings), build_renderers(settings))
