from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import pygame  # type: ignore[import-not-found]

from tilematch.paths import Paths
from tilematch.services.content import ContentService, GameContent
from tilematch.services.save_slot import FileSaveSlot
from tilematch.services.telemetry import TelemetryService

from .asset_manager import AssetManager
from .audio import SoundBoard


@dataclass
class SceneTransition:
    next_scene: "Scene"


class Scene(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self, dt: float) -> SceneTransition | None: ...
    def render(self, screen: pygame.Surface) -> None: ...


@dataclass
class LaunchOptions:
    rows: int | None = None
    columns: int | None = None
    seed: int | None = None
    autoplay: bool = False


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    paths: Paths
    assets: AssetManager
    content: ContentService
    telemetry: TelemetryService
    save_slot: FileSaveSlot
    sounds: SoundBoard
    options: LaunchOptions

    # Loaded at boot
    game: Optional[GameContent] = None


class App:
    def __init__(self, ctx: GameContext, initial_scene: Scene) -> None:
        self.ctx = ctx
        self.scene: Scene = initial_scene
        self.running = True

    def run(self, max_frames: int | None = None) -> int:
        frames = 0
        while self.running:
            dt = self.ctx.clock.tick(60) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    break
                self.scene.handle_event(event)

            tr = self.scene.update(dt)
            if tr is not None:
                self.scene = tr.next_scene

            self.scene.render(self.ctx.screen)
            pygame.display.flip()

            frames += 1
            if max_frames is not None and frames >= max_frames:
                break

        return 0
