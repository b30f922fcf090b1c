from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import TimelineSnapshot


class TimelineSource(Protocol):
    def get(self, timeline_id: str) -> TimelineSnapshot | None: ...

    def list_ids(self) -> Sequence[str]: ...


class ArtifactRepository(Protocol):
    def save(self, payload: bytes, path: Path) -> None: ...
