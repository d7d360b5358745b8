from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    repo_root: Path
    data_dir: Path
    schema_dir: Path
    assets_dir: Path
    userdata_dir: Path

    @property
    def save_path(self) -> Path:
        return self.userdata_dir / "save.json"

    @property
    def telemetry_path(self) -> Path:
        return self.userdata_dir / "telemetry.jsonl"


def get_paths() -> Paths:
    # src/tilematch/paths.py -> parents: [tilematch, src, repo_root]
    repo_root = Path(__file__).resolve().parents[2]
    data_dir = repo_root / "src" / "tilematch" / "data"
    return Paths(
        repo_root=repo_root,
        data_dir=data_dir,
        schema_dir=data_dir / "schemas",
        assets_dir=repo_root / "assets",
        userdata_dir=repo_root / "userdata",
    )
