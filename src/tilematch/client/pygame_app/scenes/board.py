from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from tilematch.engine.autoplay import Autoplayer
from tilematch.engine.card import CardState
from tilematch.engine.events import Event, FlipRequested, GameOver, Victory
from tilematch.engine.session import GameSession

from ..app import GameContext, SceneTransition
from ..asset_manager import CardArt
from ..flip_animation import FlipAnimation
from ..ui import Button, dim, draw_centered, draw_text

HUD_HEIGHT = 72
MARGIN = 24
SPACING = 10


class BoardScene:
    def __init__(self, ctx: GameContext, session: GameSession, autoplayer: Autoplayer | None = None) -> None:
        self.ctx = ctx
        self.session = session
        self.autoplayer = autoplayer
        self._next: SceneTransition | None = None
        self._message = ""
        self._anims: dict[int, FlipAnimation] = {}

        game = ctx.game
        self._flip_duration = game.flip_duration if game is not None else 0.5
        if game is not None:
            self._art: CardArt = ctx.assets.card_art(game.sprite_sheet, game.sprite_size, game.config.face_count)
        else:
            self._art = ctx.assets.card_art("assets/cards/sheet.png", 256, session.config.face_count)

        w, _ = ctx.screen.get_size()
        self.btn_restart = Button(rect=pygame.Rect(w - 300, 16, 130, 40), text="Restart", on_click=self._on_restart)
        self.btn_load = Button(rect=pygame.Rect(w - 156, 16, 130, 40), text="Load", on_click=self._on_load)

    # -------- Actions --------
    def _on_restart(self) -> None:
        self._anims.clear()
        self.session.start(self.session.rows, self.session.columns)
        if self.autoplayer is not None:
            self.autoplayer.reset()
        self._message = ""
        self.ctx.telemetry.log("restart", {"rows": self.session.rows, "columns": self.session.columns})

    def _on_load(self) -> None:
        if self.session.load():
            self._message = f"Loaded saved score: {self.session.score}"
        else:
            self._message = "No usable saved game."

    # -------- Layout --------
    def _cell_size(self) -> int:
        w, h = self.ctx.screen.get_size()
        cols = max(1, self.session.columns)
        rows = max(1, self.session.rows)
        avail_w = w - MARGIN * 2 - (cols - 1) * SPACING
        avail_h = h - HUD_HEIGHT - MARGIN * 2 - (rows - 1) * SPACING
        return max(8, min(avail_w // cols, avail_h // rows))

    def _card_rect(self, card_id: int) -> pygame.Rect:
        w, h = self.ctx.screen.get_size()
        size = self._cell_size()
        cols, rows = self.session.columns, self.session.rows
        grid_w = cols * size + (cols - 1) * SPACING
        grid_h = rows * size + (rows - 1) * SPACING
        x0 = (w - grid_w) // 2
        y0 = HUD_HEIGHT + (h - HUD_HEIGHT - grid_h) // 2
        row, col = divmod(card_id, cols)
        return pygame.Rect(x0 + col * (size + SPACING), y0 + row * (size + SPACING), size, size)

    def _hit_test(self, pos: tuple[int, int]) -> int | None:
        for card in self.session.cards:
            if self._card_rect(card.id).collidepoint(pos):
                return card.id
        return None

    # -------- Scene protocol --------
    def handle_event(self, event: pygame.event.Event) -> None:
        if self.btn_restart.handle_event(event) or self.btn_load.handle_event(event):
            return
        if self.autoplayer is not None or self.session.is_over:
            return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            card_id = self._hit_test(event.pos)
            if card_id is not None:
                self.session.activate(card_id)

    def update(self, dt: float) -> SceneTransition | None:
        if self.autoplayer is not None:
            self.autoplayer.observe(self.session)
            choice = self.autoplayer.choose(self.session)
            if choice is not None:
                self.session.activate(choice)

        self._dispatch(self.session.drain_events())

        finished: list[int] = []
        for card_id, anim in self._anims.items():
            anim.update(dt)
            if anim.done:
                finished.append(card_id)
        for card_id in finished:
            del self._anims[card_id]
            self.session.on_animation_complete(card_id)

        self.session.tick(dt)
        self._dispatch(self.session.drain_events())
        return self._next

    def _dispatch(self, events: list[Event]) -> None:
        for ev in events:
            self.ctx.sounds.play_for(ev)
            self.ctx.telemetry.log_game_event(ev)
            if isinstance(ev, FlipRequested):
                self._anims[ev.card_id] = FlipAnimation(ev.card_id, ev.face, self._flip_duration)
            elif isinstance(ev, Victory):
                self._message = "All pairs found!"
            elif isinstance(ev, GameOver):
                self._message = "Out of lives."

    # -------- Rendering --------
    def render(self, screen: pygame.Surface) -> None:
        screen.fill((16, 20, 28))
        self._draw_hud(screen)
        for card in self.session.cards:
            self._draw_card(screen, card)
        if self.session.is_over:
            self._draw_outcome(screen)
        self.btn_restart.draw(screen, self.ctx.assets.fonts.ui)
        self.btn_load.draw(screen, self.ctx.assets.fonts.ui)

    def _draw_hud(self, screen: pygame.Surface) -> None:
        fonts = self.ctx.assets.fonts
        s = self.session
        draw_text(screen, fonts.ui, f"Score: {s.score}", (MARGIN, 14))
        draw_text(screen, fonts.ui, f"Combo: x{s.combo}", (MARGIN + 160, 14))
        draw_text(screen, fonts.ui, f"Lives: {s.lives}", (MARGIN + 300, 14))
        draw_text(screen, fonts.ui, f"Moves: {s.move_count}", (MARGIN + 420, 14))
        draw_text(screen, fonts.small, f"Pairs: {s.total_matches}/{s.total_pairs}", (MARGIN, 42), color=(180, 180, 200))
        if self._message:
            draw_text(screen, fonts.small, self._message, (MARGIN + 160, 42), color=(240, 200, 120))

    def _draw_card(self, screen: pygame.Surface, card: CardState) -> None:
        rect = self._card_rect(card.id)
        anim = self._anims.get(card.id)
        if anim is not None:
            showing = anim.showing
            scale = anim.scale_x
        else:
            showing = "back" if card.is_face_down else "front"
            scale = 1.0

        face = self.session.face_for(card.id)
        if showing == "front":
            img = self.ctx.assets.scaled(f"front:{face}", self._art.fronts[face], rect.size)
        else:
            img = self.ctx.assets.scaled("back", self._art.back, rect.size)

        if scale < 1.0:
            img = pygame.transform.smoothscale(img, (max(1, int(rect.width * scale)), rect.height))
        screen.blit(img, img.get_rect(center=rect.center).topleft)

        if card.is_matched:
            shade = pygame.Surface(rect.size, pygame.SRCALPHA)
            shade.fill((0, 0, 0, 128))
            screen.blit(shade, rect.topleft)

    def _draw_outcome(self, screen: pygame.Surface) -> None:
        dim(screen)
        w, h = screen.get_size()
        fonts = self.ctx.assets.fonts
        title = "YOU WIN!" if self.session.outcome == "won" else "GAME OVER"
        draw_centered(screen, fonts.big, title, (w // 2, h // 2 - 40))
        draw_centered(
            screen,
            fonts.ui,
            f"Score {self.session.score}   Moves {self.session.move_count}",
            (w // 2, h // 2 + 10),
        )
        snap = self.session.last_snapshot
        if snap is not None and self.session.outcome == "won":
            draw_centered(screen, fonts.small, f"Saved {snap.timestamp}", (w // 2, h // 2 + 40), color=(180, 180, 200))
