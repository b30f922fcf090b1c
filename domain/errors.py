from __future__ import annotations


class TimelineRenderError(Exception):
    """Base class for failures that abort a whole render call."""


class TimelineNotFoundError(TimelineRenderError, LookupError):
    def __init__(self, timeline_id: str) -> None:
        self.timeline_id = timeline_id
        super().__init__(f"Timeline {timeline_id} not found")


class RenderEncodingError(TimelineRenderError):
    """The output format library failed to serialize the artifact."""
