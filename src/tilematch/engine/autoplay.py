from __future__ import annotations

import random
from dataclasses import dataclass
from functools import partial

from .events import FlipRequested
from .session import GameSession
from .types import Outcome


@dataclass(frozen=True)
class AutoplaySpec:
    """Tuning for the attract-mode player.

    recall:
      chance (0..1) that a revealed card is remembered.
      1.0 never forgets, 0.0 plays blind.
    """

    recall: float = 1.0
    seed: int = 0


class Autoplayer:
    def __init__(self, spec: AutoplaySpec | None = None) -> None:
        self.spec = spec or AutoplaySpec()
        self.rng = random.Random(self.spec.seed)
        self._known: dict[int, int] = {}  # card id -> pair key
        self._face_up: set[int] = set()

    def reset(self) -> None:
        """Forget the previous board; call after the session deals a new one."""
        self._known.clear()
        self._face_up.clear()

    def observe(self, session: GameSession) -> None:
        up = {c.id for c in session.cards if c.is_face_up}
        for card_id in sorted(up - self._face_up):
            if self.rng.random() < self.spec.recall:
                self._known[card_id] = session.cards[card_id].pair_key
        self._face_up = up
        for card in session.cards:
            if card.is_matched:
                self._known.pop(card.id, None)

    def choose(self, session: GameSession) -> int | None:
        """Next card to activate, or None while the board is busy."""
        if session.is_over or session.queue.in_flight:
            return None
        if any(c.is_flipping for c in session.cards):
            return None
        hidden = [c.id for c in session.cards if c.is_face_down]
        if not hidden:
            return None

        up = [c for c in session.cards if c.is_face_up]
        if len(up) == 1:
            first = up[0]
            for card_id in hidden:
                if self._known.get(card_id) == first.pair_key:
                    return card_id
            return self._pick_unknown(hidden)

        by_key: dict[int, list[int]] = {}
        for card_id in hidden:
            key = self._known.get(card_id)
            if key is not None:
                by_key.setdefault(key, []).append(card_id)
        for key in sorted(by_key):
            if len(by_key[key]) >= 2:
                return by_key[key][0]
        return self._pick_unknown(hidden)

    def _pick_unknown(self, hidden: list[int]) -> int:
        unknown = [card_id for card_id in hidden if card_id not in self._known]
        pool = unknown or hidden
        return pool[self.rng.randrange(len(pool))]


def play_headless(
    session: GameSession,
    player: Autoplayer,
    *,
    flip_duration: float = 0.25,
    dt: float = 1.0 / 60.0,
    max_seconds: float = 600.0,
) -> Outcome:
    """Run a session to completion without a display.

    Stands in for the presentation layer: every flip request completes after
    ``flip_duration`` on the session's own scheduler.
    """
    elapsed = 0.0
    while not session.is_over and elapsed < max_seconds:
        for ev in session.drain_events():
            if isinstance(ev, FlipRequested):
                session.scheduler.call_later(flip_duration, partial(session.on_animation_complete, ev.card_id))
        player.observe(session)
        choice = player.choose(session)
        if choice is not None:
            session.activate(choice)
        session.tick(dt)
        elapsed += dt
    return session.outcome
