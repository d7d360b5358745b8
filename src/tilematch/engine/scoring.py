from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoreKeeper:
    base_match_score: int = 100
    base_mismatch_penalty: int = 10
    combo_bonus: int = 50
    initial_lives: int = 10

    score: int = 0
    combo: int = 0
    move_count: int = 0
    total_matches: int = 0
    lives: int = 0

    def __post_init__(self) -> None:
        for name in ("base_match_score", "base_mismatch_penalty", "combo_bonus", "initial_lives"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative.")
        self.reset()

    def reset(self) -> None:
        self.score = 0
        self.combo = 0
        self.move_count = 0
        self.total_matches = 0
        self.lives = self.initial_lives

    def apply_match(self) -> int:
        """Score a found pair and return the points awarded."""
        self.combo += 1
        gained = self.base_match_score + self.combo * self.combo_bonus
        self.score += gained
        self.total_matches += 1
        return gained

    def apply_mismatch(self) -> None:
        self.combo = 0
        self.score = max(0, self.score - self.base_mismatch_penalty)
        self.lives = max(0, self.lives - 1)

    def record_move(self) -> None:
        self.move_count += 1
