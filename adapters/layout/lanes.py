from __future__ import annotations

from collections.abc import Sequence

from domain.models import Track


class LaneAssigner:
    """Lane index per track, in the order the caller supplied the tracks."""

    def __init__(self, tracks: Sequence[Track]) -> None:
        self.tracks = list(tracks)
        self._index: dict[str, int] = {}
        for idx, track in enumerate(self.tracks):
            self._index.setdefault(track.id, idx)

    @property
    def lane_count(self) -> int:
        return max(1, len(self.tracks))

    def lane_index(self, track_id: str) -> int:
        return self._index.get(track_id, 0)

    def track_at(self, lane_index: int) -> Track | None:
        if 0 <= lane_index < len(self.tracks):
            return self.tracks[lane_index]
        return None
