"""Deterministic, headless match-resolution engine for TileMatch.

IMPORTANT: This package must never import pygame.
"""

from .card import CardState
from .events import (
    CardActivated,
    Event,
    FlipRequested,
    GameOver,
    MatchFound,
    MismatchFound,
    Victory,
)
from .match_queue import MatchQueue, PairingError
from .scheduler import Scheduler
from .scoring import ScoreKeeper
from .serialize import LoadFailure, PersistenceCodec, Snapshot
from .session import GameConfig, GameSession, new_session
from .types import CardPhase, Face, Outcome

__all__ = [
    "CardActivated",
    "CardPhase",
    "CardState",
    "Event",
    "Face",
    "FlipRequested",
    "GameConfig",
    "GameOver",
    "GameSession",
    "LoadFailure",
    "MatchFound",
    "MatchQueue",
    "MismatchFound",
    "Outcome",
    "PairingError",
    "PersistenceCodec",
    "Scheduler",
    "ScoreKeeper",
    "Snapshot",
    "Victory",
    "new_session",
]
