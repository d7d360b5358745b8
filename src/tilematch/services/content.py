from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from tilematch.engine.session import GameConfig


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_section(obj: Mapping[str, object], key: str) -> Mapping[str, object]:
    v = obj.get(key)
    if not isinstance(v, dict):
        raise ContentError(f"Expected object for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


def _require_number(obj: Mapping[str, object], key: str) -> float:
    v = obj.get(key)
    if not isinstance(v, (int, float)) or isinstance(v, bool):
        raise ContentError(f"Expected number for {key}")
    return float(v)


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


@dataclass(frozen=True)
class GameContent:
    """Engine config plus the presentation-only knobs from game.json."""

    config: GameConfig
    flip_duration: float
    sprite_sheet: str
    sprite_size: int

    def with_overrides(
        self,
        *,
        rows: int | None = None,
        columns: int | None = None,
        seed: int | None = None,
    ) -> "GameContent":
        cfg = self.config
        if rows is not None:
            cfg = replace(cfg, rows=rows)
        if columns is not None:
            cfg = replace(cfg, columns=columns)
        if seed is not None:
            cfg = replace(cfg, seed=seed)
        return replace(self, config=cfg)


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_game_content(self) -> GameContent:
        path = self._data_dir / "game.json"
        schema = _load_json(self._schema_dir / "game.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError("game.json must be an object")

        grid = _require_section(raw, "grid")
        scoring = _require_section(raw, "scoring")
        timing = _require_section(raw, "timing")
        assets = _require_section(raw, "assets")

        config = GameConfig(
            rows=_require_int(grid, "rows"),
            columns=_require_int(grid, "columns"),
            initial_lives=_require_int(scoring, "initial_lives"),
            base_match_score=_require_int(scoring, "base_match_score"),
            base_mismatch_penalty=_require_int(scoring, "base_mismatch_penalty"),
            combo_bonus=_require_int(scoring, "combo_bonus"),
            activation_cooldown=_require_number(timing, "activation_cooldown"),
            viewing_delay=_require_number(timing, "viewing_delay"),
            face_count=_require_int(assets, "face_count"),
        )
        return GameContent(
            config=config,
            flip_duration=_require_number(timing, "flip_duration"),
            sprite_sheet=_require_str(assets, "sprite_sheet"),
            sprite_size=_require_int(assets, "sprite_size"),
        )

    def load_game_config(self) -> GameConfig:
        return self.load_game_content().config

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_game_content()
