from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Mapping, Protocol

from jsonschema import Draft202012Validator

if TYPE_CHECKING:
    from .session import GameSession

log = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

SNAPSHOT_SCHEMA: dict[str, object] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": [
        "score",
        "move_count",
        "total_matches",
        "rows",
        "columns",
        "pair_keys",
        "matched",
        "timestamp",
    ],
    "properties": {
        "score": {"type": "integer", "minimum": 0},
        "move_count": {"type": "integer", "minimum": 0},
        "total_matches": {"type": "integer", "minimum": 0},
        "rows": {"type": "integer", "minimum": 1},
        "columns": {"type": "integer", "minimum": 1},
        "pair_keys": {"type": "array", "items": {"type": "integer", "minimum": 0}},
        "matched": {"type": "array", "items": {"type": "boolean"}},
        "timestamp": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$"},
    },
}

_VALIDATOR = Draft202012Validator(SNAPSHOT_SCHEMA)


@dataclass(frozen=True)
class Snapshot:
    score: int
    move_count: int
    total_matches: int
    rows: int
    columns: int
    pair_keys: tuple[int, ...]
    matched: tuple[bool, ...]
    timestamp: str

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "Snapshot":
        # Callers validate against SNAPSHOT_SCHEMA first.
        return Snapshot(
            score=int(d["score"]),  # type: ignore[arg-type]
            move_count=int(d["move_count"]),  # type: ignore[arg-type]
            total_matches=int(d["total_matches"]),  # type: ignore[arg-type]
            rows=int(d["rows"]),  # type: ignore[arg-type]
            columns=int(d["columns"]),  # type: ignore[arg-type]
            pair_keys=tuple(int(k) for k in d["pair_keys"]),  # type: ignore[union-attr]
            matched=tuple(bool(m) for m in d["matched"]),  # type: ignore[union-attr]
            timestamp=str(d["timestamp"]),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "score": self.score,
            "move_count": self.move_count,
            "total_matches": self.total_matches,
            "rows": self.rows,
            "columns": self.columns,
            "pair_keys": list(self.pair_keys),
            "matched": list(self.matched),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class LoadFailure:
    reason: str


class SaveSlot(Protocol):
    def read(self) -> bytes | None: ...

    def write(self, data: bytes) -> None: ...


class MemorySaveSlot:
    """Single in-process slot; each write replaces the previous one."""

    def __init__(self) -> None:
        self._data: bytes | None = None

    def read(self) -> bytes | None:
        return self._data

    def write(self, data: bytes) -> None:
        self._data = data


def snapshot(session: "GameSession", *, now: datetime | None = None) -> Snapshot:
    """Capture the persisted view of a live session (row-major arrays)."""
    ts = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return Snapshot(
        score=session.score,
        move_count=session.move_count,
        total_matches=session.total_matches,
        rows=session.rows,
        columns=session.columns,
        pair_keys=tuple(c.pair_key for c in session.cards),
        matched=tuple(c.is_matched for c in session.cards),
        timestamp=ts,
    )


def encode(snap: Snapshot) -> bytes:
    return json.dumps(snap.to_dict(), indent=2).encode("utf-8")


def decode(raw: bytes | str) -> Snapshot | LoadFailure:
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        return LoadFailure(f"Invalid JSON: {e}")

    errors = sorted(_VALIDATOR.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = ["Snapshot failed validation:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        return LoadFailure("\n".join(lines))

    snap = Snapshot.from_dict(data)
    cells = snap.rows * snap.columns
    if len(snap.pair_keys) != cells or len(snap.matched) != cells:
        return LoadFailure(f"Snapshot arrays do not cover a {snap.rows}x{snap.columns} grid.")
    return snap


class PersistenceCodec:
    def __init__(self, slot: SaveSlot | None = None, clock: Callable[[], datetime] | None = None) -> None:
        self.slot: SaveSlot = slot if slot is not None else MemorySaveSlot()
        self._clock = clock or datetime.now

    def save(self, session: "GameSession") -> Snapshot:
        snap = snapshot(session, now=self._clock())
        self.slot.write(encode(snap))
        return snap

    def load(self, raw: bytes | str | None = None) -> Snapshot | LoadFailure:
        result = self._read() if raw is None else decode(raw)
        if isinstance(result, LoadFailure):
            log.warning("load failed: %s", result.reason)
        return result

    def _read(self) -> Snapshot | LoadFailure:
        try:
            raw = self.slot.read()
        except OSError as e:
            return LoadFailure(f"Could not read save slot: {e}")
        if raw is None:
            return LoadFailure("No saved game.")
        return decode(raw)
