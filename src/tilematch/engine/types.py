from __future__ import annotations

from typing import Literal

Face = Literal["front", "back"]
CardPhase = Literal["face_down", "flipping", "face_up", "matched"]
Outcome = Literal["in_progress", "won", "lost"]

TERMINAL_OUTCOMES: frozenset[Outcome] = frozenset({"won", "lost"})
