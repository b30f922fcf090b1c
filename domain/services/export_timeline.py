from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from domain.errors import TimelineNotFoundError
from domain.models import ExportFormat, RenderedArtifact, TimelineSnapshot
from domain.ports.repositories import TimelineSource
from domain.services.render_timeline_base import TimelineRenderer

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def build_export_filename(title: str, fallback: str, extension: str) -> str:
    stem = _UNSAFE_FILENAME_CHARS.sub("_", title.strip()).strip("._") or fallback
    return f"{stem}.{extension}"


class ExportTimeline:
    def __init__(
        self,
        source: TimelineSource,
        renderers: Mapping[ExportFormat, TimelineRenderer],
    ) -> None:
        self.source = source
        self.renderers = dict(renderers)

    def load(self, timeline_id: str) -> TimelineSnapshot:
        snapshot = self.source.get(timeline_id)
        if snapshot is None:
            raise TimelineNotFoundError(timeline_id)
        return snapshot

    def export(self, timeline_id: str, fmt: ExportFormat) -> RenderedArtifact:
        renderer = self.renderers.get(fmt)
        if renderer is None:
            msg = f"No renderer configured for format: {fmt.value}"
            raise ValueError(msg)
        snapshot = self.load(timeline_id)
        document = renderer.render(snapshot)
        content = document.to_bytes()
        logger.info(
            "Exported timeline %s as %s (%d bytes)", timeline_id, fmt.value, len(content)
        )
        return RenderedArtifact(
            timeline_id=timeline_id,
            format=fmt,
            content=content,
            media_type=renderer.media_type,
            filename=build_export_filename(
                snapshot.timeline.title, fallback=timeline_id, extension=renderer.extension
            ),
        )
