from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from adapters.filesystem.json_utils import dump_json_bytes, load_json, write_bytes_atomic
from domain.models import TimelineSnapshot
from domain.ports.repositories import TimelineSource

SNAPSHOT_SUFFIX = ".json"


class FileSystemTimelineSource(TimelineSource):
    """One ``<timeline_id>.json`` snapshot per timeline inside ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def get(self, timeline_id: str) -> TimelineSnapshot | None:
        path = self.path_for(timeline_id)
        if path is None or not path.is_file():
            return None
        return self.load_by_path(path)

    def list_ids(self) -> list[str]:
        return sorted(path.stem for path in self._iter_paths())

    def load_by_path(self, path: Path) -> TimelineSnapshot:
        return TimelineSnapshot.model_validate(load_json(path))

    def save(self, snapshot: TimelineSnapshot) -> Path:
        path = self.directory / f"{snapshot.timeline.id}{SNAPSHOT_SUFFIX}"
        write_bytes_atomic(path, dump_json_bytes(snapshot.model_dump(mode="json", by_alias=True)))
        return path

    def path_for(self, timeline_id: str) -> Path | None:
        if not timeline_id or Path(timeline_id).name != timeline_id or timeline_id.startswith("."):
            return None
        return self.directory / f"{timeline_id}{SNAPSHOT_SUFFIX}"

    def _iter_paths(self) -> Iterable[Path]:
        if not self.directory.exists():
            return []
        return self.directory.glob(f"*{SNAPSHOT_SUFFIX}")
