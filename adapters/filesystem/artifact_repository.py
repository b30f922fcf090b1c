from __future__ import annotations

from pathlib import Path

from filelock import FileLock

from adapters.filesystem.json_utils import write_bytes_atomic
from domain.ports.repositories import ArtifactRepository


class FileSystemArtifactRepository(ArtifactRepository):
    def save(self, payload: bytes, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        lock_path = path.with_suffix(f"{path.suffix}.lock")
        with FileLock(str(lock_path)):
            write_bytes_atomic(path, payload)
