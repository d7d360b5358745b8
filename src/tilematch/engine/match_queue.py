from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .card import CardState
from .events import Event, FlipRequested, MatchFound, MismatchFound
from .scheduler import Scheduler
from .scoring import ScoreKeeper

log = logging.getLogger(__name__)


class PairingError(RuntimeError):
    """A pair handed to evaluation breaks the queue's own contract."""


@dataclass
class PairVerdict:
    first: int
    second: int
    matched: bool
    events: list[Event] = field(default_factory=list)


class MatchQueue:
    """Collects face-up cards into pairs and resolves them after a viewing delay.

    The pending list is emptied as soon as it holds two cards, before the
    evaluation runs, so a third card may be revealed and queued while the
    previous pair is still on screen.
    """

    def __init__(
        self,
        cards: Sequence[CardState],
        score: ScoreKeeper,
        scheduler: Scheduler,
        viewing_delay: float,
        on_resolved: Callable[[PairVerdict], None],
    ) -> None:
        self._cards = cards
        self._score = score
        self._scheduler = scheduler
        self._viewing_delay = viewing_delay
        self._on_resolved = on_resolved
        self._pending: list[int] = []
        self._in_flight = 0
        self._generation = 0

    @property
    def pending(self) -> tuple[int, ...]:
        return tuple(self._pending)

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def reset(self) -> None:
        """Forget everything queued for the previous board.

        Evaluations already on the scheduler still fire but are dropped, since
        their card ids refer to a board that no longer exists.
        """
        self._pending.clear()
        self._in_flight = 0
        self._generation += 1

    def push(self, card_id: int) -> bool:
        """Queue a card that just finished flipping face up.

        Returns True when this push completed a pair and an evaluation was
        scheduled.
        """
        if card_id in self._pending:
            return False
        self._pending.append(card_id)
        if len(self._pending) < 2:
            return False

        first, second = self._pending[0], self._pending[1]
        del self._pending[:2]
        self._in_flight += 1
        generation = self._generation
        self._scheduler.call_later(self._viewing_delay, lambda: self._run(generation, first, second))
        return True

    def _run(self, generation: int, first: int, second: int) -> None:
        if generation != self._generation:
            return
        self._in_flight -= 1
        verdict = self.evaluate(first, second)
        self._on_resolved(verdict)

    def evaluate(self, first: int, second: int) -> PairVerdict:
        if first == second:
            raise PairingError(f"Card {first} paired with itself.")
        c1 = self._cards[first]
        c2 = self._cards[second]

        self._score.record_move()

        if c1.pair_key == c2.pair_key:
            gained = self._score.apply_match()
            c1.mark_matched()
            c2.mark_matched()
            log.debug("pair %d/%d matched (+%d, combo %d)", first, second, gained, self._score.combo)
            return PairVerdict(first, second, matched=True, events=[MatchFound(first, second)])

        self._score.apply_mismatch()
        events: list[Event] = [MismatchFound(first, second)]
        for card in (c1, c2):
            if card.begin_flip("back") is not None:
                events.append(FlipRequested(card_id=card.id, face="back"))
        log.debug("pair %d/%d mismatched (lives %d)", first, second, self._score.lives)
        return PairVerdict(first, second, matched=False, events=events)
