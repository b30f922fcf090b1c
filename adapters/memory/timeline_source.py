from __future__ import annotations

from collections.abc import Iterable

from domain.models import TimelineSnapshot
from domain.ports.repositories import TimelineSource


class InMemoryTimelineSource(TimelineSource):
    def __init__(self, snapshots: Iterable[TimelineSnapshot] = ()) -> None:
        self._snapshots = {snapshot.timeline.id: snapshot for snapshot in snapshots}

    def add(self, snapshot: TimelineSnapshot) -> None:
        self._snapshots[snapshot.timeline.id] = snapshot

    def get(self, timeline_id: str) -> TimelineSnapshot | None:
        return self._snapshots.get(timeline_id)

    def list_ids(self) -> list[str]:
        return sorted(self._snapshots)
