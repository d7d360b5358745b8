from __future__ import annotations

import json
import os
from pathlib import Path

# Allow headless generation (CI, terminals without a display)
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame  # type: ignore[import-not-found]


def _repo_root() -> Path:
    # tools/generate_placeholder_assets.py -> parents: [tools, repo_root]
    return Path(__file__).resolve().parents[1]


FACE_COLORS: tuple[tuple[int, int, int], ...] = (
    (214, 64, 64),
    (236, 196, 54),
    (92, 180, 84),
    (74, 132, 214),
    (168, 92, 200),
    (236, 128, 48),
    (60, 186, 186),
    (220, 110, 160),
)

SHEET_COLUMNS = 4


def generate_all() -> None:
    root = _repo_root()
    game = json.loads((root / "src" / "tilematch" / "data" / "game.json").read_text(encoding="utf-8"))
    cell = int(game["assets"]["sprite_size"])
    face_count = int(game["assets"]["face_count"])
    out_path = root / game["assets"]["sprite_sheet"]
    out_path.parent.mkdir(parents=True, exist_ok=True)

    pygame.init()
    pygame.font.init()
    font = pygame.font.SysFont(None, cell // 2)

    # Fronts first, back in the cell right after the last front
    total = face_count + 1
    rows = (total + SHEET_COLUMNS - 1) // SHEET_COLUMNS
    sheet = pygame.Surface((SHEET_COLUMNS * cell, rows * cell), pygame.SRCALPHA)
    for i in range(total):
        x, y = (i % SHEET_COLUMNS) * cell, (i // SHEET_COLUMNS) * cell
        surf = _make_back(cell) if i == face_count else _make_face(font, i, cell)
        sheet.blit(surf, (x, y))

    pygame.image.save(sheet, out_path.as_posix())
    print(f"Wrote {out_path} ({face_count} faces + back, {cell}px cells)")


def _make_face(font: pygame.font.Font, index: int, cell: int) -> pygame.Surface:
    surf = pygame.Surface((cell, cell))
    surf.fill((245, 240, 230))
    color = FACE_COLORS[index % len(FACE_COLORS)]
    pygame.draw.rect(surf, (20, 20, 20), pygame.Rect(4, 4, cell - 8, cell - 8), width=4, border_radius=16)
    pygame.draw.circle(surf, color, (cell // 2, cell // 2), cell // 3)
    label = font.render(str(index + 1), True, (20, 20, 20))
    surf.blit(label, label.get_rect(center=(cell // 2, cell // 2)))
    return surf


def _make_back(cell: int) -> pygame.Surface:
    surf = pygame.Surface((cell, cell))
    surf.fill((40, 52, 96))
    step = max(8, cell // 8)
    for i in range(-cell, cell, step):
        pygame.draw.line(surf, (60, 76, 130), (i, 0), (i + cell, cell), 3)
    pygame.draw.rect(surf, (220, 220, 240), pygame.Rect(4, 4, cell - 8, cell - 8), width=4, border_radius=16)
    return surf


if __name__ == "__main__":
    generate_all()
