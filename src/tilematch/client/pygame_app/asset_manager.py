from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pygame  # type: ignore[import-not-found]

log = logging.getLogger(__name__)

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


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font


@dataclass
class CardArt:
    fronts: list[pygame.Surface]
    back: pygame.Surface


class AssetManager:
    def __init__(self, repo_root: Path, assets_dir: Path) -> None:
        self.repo_root = repo_root
        self.assets_dir = assets_dir
        self._cache: dict[tuple[str, int, int], pygame.Surface] = {}

        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 24),
            small=pygame.font.SysFont(None, 18),
            big=pygame.font.SysFont(None, 48),
        )

    def _resolve(self, path_str: str) -> Path:
        p = Path(path_str)
        if p.is_absolute():
            return p
        # Allow data files to reference "assets/..."
        if path_str.startswith("assets/"):
            return self.repo_root / path_str
        return self.assets_dir / path_str

    def _load(self, path_str: str) -> pygame.Surface | None:
        path = self._resolve(path_str)
        if not path.exists():
            return None
        try:
            img = pygame.image.load(path.as_posix())
        except pygame.error as e:
            log.warning("could not load image %s: %s", path, e)
            return None
        if pygame.display.get_surface() is not None:
            img = img.convert_alpha()
        return img

    def slice_sheet(self, path_str: str, cell: int, limit: int) -> list[pygame.Surface]:
        """Cut a sprite sheet into square cells, row by row from the top left."""
        sheet = self._load(path_str)
        if sheet is None:
            return []
        columns = sheet.get_width() // cell
        rows = sheet.get_height() // cell
        cells: list[pygame.Surface] = []
        for y in range(rows):
            for x in range(columns):
                if len(cells) >= limit:
                    return cells
                cells.append(sheet.subsurface(pygame.Rect(x * cell, y * cell, cell, cell)).copy())
        return cells

    def card_art(self, sheet_path: str, cell: int, face_count: int) -> CardArt:
        """Front faces then the card back, as laid out by the placeholder tool.

        Falls back to generated art when the sheet is missing or short.
        """
        cells = self.slice_sheet(sheet_path, cell, face_count + 1)
        if len(cells) == face_count + 1:
            return CardArt(fronts=cells[:face_count], back=cells[face_count])
        if cells:
            log.warning("sprite sheet %s has %d cells, need %d", sheet_path, len(cells), face_count + 1)
        fronts = [self._placeholder_face(i, cell) for i in range(face_count)]
        return CardArt(fronts=fronts, back=self._placeholder_back(cell))

    def scaled(self, key: str, img: pygame.Surface, size: tuple[int, int]) -> pygame.Surface:
        cache_key = (key, size[0], size[1])
        if cache_key not in self._cache:
            self._cache[cache_key] = pygame.transform.smoothscale(img, size)
        return self._cache[cache_key]

    def _placeholder_face(self, index: int, cell: int) -> pygame.Surface:
        surf = pygame.Surface((cell, cell), pygame.SRCALPHA)
        surf.fill((245, 240, 230))
        color = FACE_COLORS[index % len(FACE_COLORS)]
        pygame.draw.circle(surf, color, (cell // 2, cell // 2), cell // 3)
        label = self.fonts.big.render(str(index + 1), True, (20, 20, 20))
        surf.blit(label, label.get_rect(center=(cell // 2, cell // 2)))
        return surf

    def _placeholder_back(self, cell: int) -> pygame.Surface:
        surf = pygame.Surface((cell, cell), pygame.SRCALPHA)
        surf.fill((40, 52, 96))
        step = max(8, cell // 8)
        for i in range(-cell, cell, step):
            pygame.draw.line(surf, (60, 76, 130), (i, 0), (i + cell, cell), 3)
        return surf
