from __future__ import annotations

import logging
from pathlib import Path

log = logging.getLogger(__name__)


class FileSaveSlot:
    """The single on-disk save slot; every write replaces the file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def read(self) -> bytes | None:
        if not self._path.exists():
            return None
        return self._path.read_bytes()

    def write(self, data: bytes) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Write beside the slot then swap
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_bytes(data)
        tmp.replace(self._path)
        log.debug("saved game to %s (%d bytes)", self._path, len(data))

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
