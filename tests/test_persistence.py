from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import pytest

from tilematch.engine.serialize import LoadFailure, PersistenceCodec, Snapshot, decode, encode, snapshot
from tilematch.engine.session import GameConfig, GameSession
from tilematch.services.save_slot import FileSaveSlot

FIXED = datetime(2024, 5, 17, 9, 30, 5)


def _played_session(codec: PersistenceCodec | None = None) -> GameSession:
    cfg = GameConfig(rows=2, columns=3, activation_cooldown=0.0, viewing_delay=0.5, seed=1)
    s = GameSession(cfg, codec=codec)
    s.start(pair_keys=[0, 1, 2, 0, 1, 2])
    for card_id in (0, 3):
        s.activate(card_id)
        s.on_animation_complete(card_id)
    s.tick(0.5)
    assert s.score == 150
    return s


def _valid_dict() -> dict[str, object]:
    return {
        "score": 10,
        "move_count": 2,
        "total_matches": 1,
        "rows": 1,
        "columns": 2,
        "pair_keys": [0, 0],
        "matched": [True, True],
        "timestamp": "2024-05-17 09:30:05",
    }


def test_snapshot_captures_row_major_grid() -> None:
    s = _played_session()
    snap = snapshot(s, now=FIXED)
    assert snap == Snapshot(
        score=150,
        move_count=1,
        total_matches=1,
        rows=2,
        columns=3,
        pair_keys=(0, 1, 2, 0, 1, 2),
        matched=(True, False, False, True, False, False),
        timestamp="2024-05-17 09:30:05",
    )


def test_encode_produces_documented_fields() -> None:
    snap = snapshot(_played_session(), now=FIXED)
    raw = json.loads(encode(snap))
    assert set(raw) == {"score", "move_count", "total_matches", "rows", "columns", "pair_keys", "matched", "timestamp"}
    assert decode(encode(snap)) == snap


def test_save_overwrites_single_slot() -> None:
    codec = PersistenceCodec(clock=lambda: FIXED)
    s = _played_session(codec)
    first = s.save()
    s.score_keeper.score = 999
    second = s.save()
    assert first.score == 150
    loaded = codec.load()
    assert loaded == second
    assert isinstance(loaded, Snapshot) and loaded.score == 999


def test_load_restores_only_score() -> None:
    codec = PersistenceCodec()
    _played_session(codec).save()

    fresh = GameSession(GameConfig(rows=2, columns=3, seed=5), codec=codec)
    fresh.start()
    keys_before = [c.pair_key for c in fresh.cards]

    assert fresh.load()
    assert fresh.score == 150
    assert fresh.move_count == 0
    assert fresh.total_matches == 0
    assert [c.pair_key for c in fresh.cards] == keys_before
    assert not any(c.is_matched for c in fresh.cards)


def test_load_from_empty_slot_reports_failure() -> None:
    s = GameSession(GameConfig(seed=3))
    s.start()
    assert not s.load()
    assert s.score == 0
    assert isinstance(s.codec.load(), LoadFailure)


def test_corrupt_snapshots_are_load_failures() -> None:
    assert isinstance(decode(b"{not json"), LoadFailure)
    assert isinstance(decode(b"\xff\xfe"), LoadFailure)
    assert isinstance(decode(b"[]"), LoadFailure)

    missing = _valid_dict()
    del missing["score"]
    assert isinstance(decode(json.dumps(missing)), LoadFailure)

    wrong_type = _valid_dict()
    wrong_type["matched"] = [1, 0]
    assert isinstance(decode(json.dumps(wrong_type)), LoadFailure)

    bad_ts = _valid_dict()
    bad_ts["timestamp"] = "yesterday"
    assert isinstance(decode(json.dumps(bad_ts)), LoadFailure)

    short = _valid_dict()
    short["pair_keys"] = [0]
    result = decode(json.dumps(short))
    assert isinstance(result, LoadFailure)
    assert "1x2" in result.reason

    huge_int = b"{\"score\": 1" + b"0" * 5000 + b"}"
    assert isinstance(decode(huge_int), LoadFailure)
    assert isinstance(decode(b"[" * 200000), LoadFailure)

    assert isinstance(decode(json.dumps(_valid_dict())), Snapshot)


def test_session_load_with_corrupt_bytes_keeps_state() -> None:
    s = _played_session()
    assert not s.load(b'{"score": "lots"}')
    assert s.score == 150


def test_file_slot_round_trip(tmp_path: Path) -> None:
    slot = FileSaveSlot(tmp_path / "nested" / "save.json")
    assert slot.read() is None
    codec = PersistenceCodec(slot, clock=lambda: FIXED)
    s = _played_session(codec)
    s.save()
    assert slot.exists()
    assert json.loads(slot.path.read_text(encoding="utf-8"))["score"] == 150

    other = GameSession(GameConfig(seed=9), codec=PersistenceCodec(FileSaveSlot(slot.path)))
    other.start()
    assert other.load()
    assert other.score == 150

    slot.clear()
    assert not other.load()


def test_session_load_survives_pathological_json() -> None:
    s = _played_session()
    assert not s.load(b'{"score": 1' + b"0" * 5000 + b"}")
    assert not s.load(b"[" * 200000)
    assert s.score == 150


class _BrokenSlot:
    def read(self) -> bytes | None:
        raise OSError("disk unplugged")

    def write(self, data: bytes) -> None:
        raise OSError("disk full")


def test_every_load_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="tilematch.engine.serialize")
    assert isinstance(PersistenceCodec().load(), LoadFailure)
    assert isinstance(PersistenceCodec(_BrokenSlot()).load(), LoadFailure)
    assert isinstance(PersistenceCodec().load(b"{not json"), LoadFailure)

    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(messages) == 3
    assert "No saved game." in messages[0]
    assert "disk unplugged" in messages[1]
    assert "Invalid JSON" in messages[2]


def test_victory_stands_when_autosave_fails(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="tilematch.engine.session")
    cfg = GameConfig(rows=1, columns=2, activation_cooldown=0.0, viewing_delay=0.5, seed=1)
    s = GameSession(cfg, codec=PersistenceCodec(_BrokenSlot()))
    s.start(pair_keys=[0, 0])
    for card_id in (0, 1):
        s.activate(card_id)
        s.on_animation_complete(card_id)
    s.tick(0.5)

    assert s.outcome == "won"
    assert s.last_snapshot is None
    assert any("could not save game" in r.getMessage() for r in caplog.records)
