from __future__ import annotations

from dataclasses import dataclass

from tilematch.engine.types import Face


def _ease_in_out(t: float) -> float:
    t = max(0.0, min(1.0, t))
    return t * t * (3.0 - 2.0 * t)


@dataclass
class FlipAnimation:
    """Shrink-then-expand flip; the shown face swaps at the midpoint."""

    card_id: int
    face: Face
    duration: float
    elapsed: float = 0.0
    done: bool = False
    min_scale: float = 0.1

    def update(self, dt: float) -> None:
        if self.done:
            return
        self.elapsed += dt
        if self.elapsed >= self.duration:
            self.elapsed = self.duration
            self.done = True

    @property
    def progress(self) -> float:
        return self.elapsed / max(0.0001, self.duration)

    @property
    def showing(self) -> Face:
        if self.progress < 0.5:
            return "back" if self.face == "front" else "front"
        return self.face

    @property
    def scale_x(self) -> float:
        half = self.progress * 2.0
        if half < 1.0:
            return 1.0 - (1.0 - self.min_scale) * _ease_in_out(half)
        return self.min_scale + (1.0 - self.min_scale) * _ease_in_out(half - 1.0)
