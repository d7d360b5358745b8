from __future__ import annotations

import json
from pathlib import Path

from tilematch.engine.events import GameOver, MatchFound
from tilematch.services.telemetry import TelemetryService


def test_game_events_are_appended_as_json_lines(tmp_path: Path) -> None:
    telemetry = TelemetryService(tmp_path / "userdata" / "telemetry.jsonl")
    telemetry.log_game_event(MatchFound(2, 5))
    telemetry.log_game_event(GameOver(40))

    lines = telemetry.path.read_text(encoding="utf-8").splitlines()
    recs = [json.loads(line) for line in lines]
    assert [r["type"] for r in recs] == ["MATCH_FOUND", "GAME_OVER"]
    assert recs[0]["payload"] == {"first": 2, "second": 5}
    assert recs[1]["payload"] == {"score": 40}
