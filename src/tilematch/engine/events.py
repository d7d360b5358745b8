from __future__ import annotations

from dataclasses import dataclass

from .types import Face


# Card-level transitions, consumed inside the engine.


@dataclass(frozen=True)
class FlipStarted:
    card_id: int
    face: Face


@dataclass(frozen=True)
class FlipCompleted:
    card_id: int
    face: Face


@dataclass(frozen=True)
class CardMatched:
    card_id: int


# Session-level notifications for presentation/audio collaborators.


@dataclass(frozen=True)
class CardActivated:
    card_id: int


@dataclass(frozen=True)
class FlipRequested:
    card_id: int
    face: Face


@dataclass(frozen=True)
class MatchFound:
    first: int
    second: int


@dataclass(frozen=True)
class MismatchFound:
    first: int
    second: int


@dataclass(frozen=True)
class Victory:
    score: int


@dataclass(frozen=True)
class GameOver:
    score: int


Event = CardActivated | FlipRequested | MatchFound | MismatchFound | Victory | GameOver


def event_name(event: Event) -> str:
    """Stable name for an event, e.g. ``MatchFound`` -> ``MATCH_FOUND``."""
    name = type(event).__name__
    out: list[str] = []
    for i, ch in enumerate(name):
        if ch.isupper() and i > 0:
            out.append("_")
        out.append(ch.upper())
    return "".join(out)
