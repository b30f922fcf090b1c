from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

NEUTRAL_GRAY = "#666666"
CONNECTION_COLOR = "#9ca3af"
LABEL_MAX_CHARS = 30
LABEL_ELLIPSIS = "..."


class EventType(str, Enum):
    POINT = "point"
    MILESTONE = "milestone"
    RANGE = "range"
    ERA = "era"


class GlyphKind(str, Enum):
    MARKER = "marker"
    BAR = "bar"


class ExportFormat(str, Enum):
    SVG = "svg"
    PDF = "pdf"


class _RenderInput(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Timeline(_RenderInput):
    id: str = Field(..., min_length=1)
    title: str = ""
    description: str = ""


class Track(_RenderInput):
    id: str = Field(..., min_length=1)
    timeline_id: str = ""
    name: str = ""
    color: str = NEUTRAL_GRAY
    sort_order: int = 0


class Event(_RenderInput):
    id: str = Field(..., min_length=1)
    track_id: str = ""
    title: str = ""
    description: str = ""
    start_date: str = ""
    end_date: Optional[str] = None
    event_type: EventType = EventType.POINT
    importance: int = 0
    color: Optional[str] = None

    @field_validator("event_type", mode="before")
    @classmethod
    def coerce_event_type(cls, value: object) -> object:
        # Unrecognized types are drawn as plain points.
        if isinstance(value, EventType):
            return value
        if not isinstance(value, str) or value not in {item.value for item in EventType}:
            return EventType.POINT
        return value

    @property
    def glyph_kind(self) -> GlyphKind:
        if self.event_type in {EventType.RANGE, EventType.ERA}:
            return GlyphKind.BAR
        return GlyphKind.MARKER


class Connection(_RenderInput):
    id: Optional[str] = None
    source_event_id: str
    target_event_id: str
    label: Optional[str] = None
    color: Optional[str] = None


class TimelineSnapshot(_RenderInput):
    timeline: Timeline
    tracks: List[Track] = Field(default_factory=list)
    events: List[Event] = Field(default_factory=list)
    connections: List[Connection] = Field(default_factory=list)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class CoordinateWindow:
    start: float
    end: float

    @property
    def width(self) -> float:
        return self.end - self.start

    def overlaps(self, start: float, end: float) -> bool:
        return end >= self.start and start <= self.end


@dataclass(frozen=True)
class PageWindow:
    index: int
    total: int
    window: CoordinateWindow

    @property
    def number(self) -> int:
        return self.index + 1

    @property
    def label(self) -> str:
        return f"Page {self.number} of {self.total}"


@dataclass(frozen=True)
class LanePlacement:
    track_id: str
    name: str
    index: int
    origin: Point
    size: Size
    color: str
    tint: str
    label_position: Point


@dataclass(frozen=True)
class LabelPlacement:
    text: str
    position: Point
    anchor: str = "middle"  # "start" or "middle"


@dataclass(frozen=True)
class EventPlacement:
    event_id: str
    event_type: EventType
    kind: GlyphKind
    lane_index: int
    x: float
    center_y: float
    width: float
    height: float
    color: str
    label: LabelPlacement

    @property
    def anchor(self) -> Point:
        return Point(self.x, self.center_y)


@dataclass(frozen=True)
class ConnectionRoute:
    source_event_id: str
    target_event_id: str
    start: Point
    control: Point
    end: Point
    arrow_head: Tuple[Point, Point, Point]
    color: str
    label: Optional[LabelPlacement] = None

    def sample(self, segments: int = 16) -> List[Point]:
        points: List[Point] = []
        for step in range(segments + 1):
            t = step / segments
            inv = 1.0 - t
            x = inv * inv * self.start.x + 2 * inv * t * self.control.x + t * t * self.end.x
            y = inv * inv * self.start.y + 2 * inv * t * self.control.y + t * t * self.end.y
            points.append(Point(x, y))
        return points


@dataclass(frozen=True)
class AxisTick:
    day: float
    x: float
    label: str


@dataclass(frozen=True)
class AxisPlacement:
    start: Point
    end: Point
    ticks: List[AxisTick] = field(default_factory=list)


@dataclass(frozen=True)
class LayoutPlan:
    window: CoordinateWindow
    scale: float
    usable_width: float
    canvas: Size
    header_height: float
    lanes: List[LanePlacement]
    events: List[EventPlacement]
    connections: List[ConnectionRoute]
    axis: AxisPlacement

    def placement_for(self, event_id: str) -> Optional[EventPlacement]:
        for placement in self.events:
            if placement.event_id == event_id:
                return placement
        return None


@dataclass(frozen=True)
class SvgDocument:
    markup: str
    size: Size

    def to_bytes(self) -> bytes:
        return self.markup.encode("utf-8")


@dataclass(frozen=True)
class PdfDocument:
    content: bytes
    page_count: int

    def to_bytes(self) -> bytes:
        return self.content


@dataclass(frozen=True)
class RenderedArtifact:
    timeline_id: str
    format: ExportFormat
    content: bytes
    media_type: str
    filename: str
