from __future__ import annotations

import logging
from pathlib import Path

import pygame  # type: ignore[import-not-found]

from tilematch.engine.events import (
    CardActivated,
    Event,
    FlipRequested,
    GameOver,
    MatchFound,
    MismatchFound,
    Victory,
)

log = logging.getLogger(__name__)

CUES = ("flip", "match", "mismatch", "victory", "game_over")


def cue_for(event: Event) -> str | None:
    if isinstance(event, CardActivated):
        return None  # the FlipRequested that follows plays the flip sound
    if isinstance(event, FlipRequested):
        return "flip"
    if isinstance(event, MatchFound):
        return "match"
    if isinstance(event, MismatchFound):
        return "mismatch"
    if isinstance(event, Victory):
        return "victory"
    if isinstance(event, GameOver):
        return "game_over"
    return None


class SoundBoard:
    """Fire-and-forget sound cues; silent when the mixer or files are missing."""

    def __init__(self, sfx_dir: Path) -> None:
        self._sounds: dict[str, pygame.mixer.Sound] = {}
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
        except pygame.error as e:
            log.info("audio disabled: %s", e)
            return
        for cue in CUES:
            path = sfx_dir / f"{cue}.wav"
            if not path.exists():
                continue
            try:
                self._sounds[cue] = pygame.mixer.Sound(path.as_posix())
            except pygame.error as e:
                log.warning("could not load %s: %s", path, e)

    def play_for(self, event: Event) -> None:
        cue = cue_for(event)
        if cue is None:
            return
        sound = self._sounds.get(cue)
        if sound is not None:
            sound.play()
