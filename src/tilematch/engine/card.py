from __future__ import annotations

from dataclasses import dataclass

from .events import CardMatched, FlipCompleted, FlipStarted
from .types import CardPhase, Face


@dataclass
class CardState:
    """Reveal state of a single tile.

    Transitions never raise: a request that makes no sense in the current
    phase returns ``None`` and leaves the card untouched.
    """

    id: int
    pair_key: int
    phase: CardPhase = "face_down"
    target: Face | None = None  # only set while flipping

    @property
    def is_face_down(self) -> bool:
        return self.phase == "face_down"

    @property
    def is_face_up(self) -> bool:
        return self.phase == "face_up"

    @property
    def is_flipping(self) -> bool:
        return self.phase == "flipping"

    @property
    def is_matched(self) -> bool:
        return self.phase == "matched"

    def begin_flip(self, face: Face) -> FlipStarted | None:
        if self.phase == "flipping" or self.phase == "matched":
            return None
        # Already showing the requested face
        if (face == "front") == (self.phase == "face_up"):
            return None
        self.phase = "flipping"
        self.target = face
        return FlipStarted(card_id=self.id, face=face)

    def complete_flip(self) -> FlipCompleted | None:
        if self.phase != "flipping" or self.target is None:
            return None
        face = self.target
        self.phase = "face_up" if face == "front" else "face_down"
        self.target = None
        return FlipCompleted(card_id=self.id, face=face)

    def mark_matched(self) -> CardMatched | None:
        if self.phase != "face_up":
            return None
        self.phase = "matched"
        return CardMatched(card_id=self.id)
