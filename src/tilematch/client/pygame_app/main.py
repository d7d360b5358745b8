from __future__ import annotations

import argparse
import logging

import pygame  # type: ignore[import-not-found]

from tilematch.paths import get_paths
from tilematch.services.content import ContentService
from tilematch.services.save_slot import FileSaveSlot
from tilematch.services.telemetry import TelemetryService

from .app import App, GameContext, LaunchOptions
from .asset_manager import AssetManager
from .audio import SoundBoard
from .scenes.boot import BootScene


def main() -> int:
    parser = argparse.ArgumentParser(prog="tilematch")
    parser.add_argument("--width", type=int, default=1024)
    parser.add_argument("--height", type=int, default=768)
    parser.add_argument("--rows", type=int, default=None)
    parser.add_argument("--columns", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--autoplay", action="store_true", help="let the computer play")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption("TileMatch")

    clock = pygame.time.Clock()
    paths = get_paths()

    ctx = GameContext(
        screen=screen,
        clock=clock,
        paths=paths,
        assets=AssetManager(repo_root=paths.repo_root, assets_dir=paths.assets_dir),
        content=ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir),
        telemetry=TelemetryService(paths.telemetry_path),
        save_slot=FileSaveSlot(paths.save_path),
        sounds=SoundBoard(paths.assets_dir / "sfx"),
        options=LaunchOptions(rows=args.rows, columns=args.columns, seed=args.seed, autoplay=args.autoplay),
    )

    app = App(ctx, BootScene(ctx))
    return app.run()
