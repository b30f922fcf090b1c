from __future__ import annotations

from typing import Protocol

from domain.models import CoordinateWindow, LayoutPlan, TimelineSnapshot


class LayoutEngine(Protocol):
    def build_plan(
        self, snapshot: TimelineSnapshot, window: CoordinateWindow | None = None
    ) -> LayoutPlan:
        ...
