from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from .card import CardState
from .events import CardActivated, Event, FlipRequested, GameOver, Victory
from .match_queue import MatchQueue, PairVerdict
from .scheduler import Scheduler
from .scoring import ScoreKeeper
from .serialize import LoadFailure, PersistenceCodec, Snapshot
from .types import Outcome, TERMINAL_OUTCOMES

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    rows: int = 3
    columns: int = 4
    initial_lives: int = 10
    base_match_score: int = 100
    base_mismatch_penalty: int = 10
    combo_bonus: int = 50
    activation_cooldown: float = 0.15
    viewing_delay: float = 0.5
    face_count: int = 5  # distinct front images the presentation can show
    seed: int | None = None


def deal_pair_keys(rows: int, columns: int, rng: random.Random) -> list[int]:
    """Row-major pair keys for a shuffled ``rows x columns`` grid."""
    pairs = (rows * columns) // 2
    keys: list[int] = []
    for k in range(pairs):
        keys.extend((k, k))
    rng.shuffle(keys)
    return keys


def validate_pair_keys(pair_keys: Sequence[int], rows: int, columns: int) -> None:
    cells = rows * columns
    if len(pair_keys) != cells:
        raise ValueError(f"Expected {cells} pair keys for a {rows}x{columns} grid, got {len(pair_keys)}.")
    counts = Counter(pair_keys)
    expected = set(range(cells // 2))
    if set(counts) != expected or any(n != 2 for n in counts.values()):
        raise ValueError("Each pair key in [0, rows*columns/2) must appear exactly twice.")


class GameSession:
    """Owns the board and drives a single game from first flip to outcome.

    Collaborators call ``activate`` and ``on_animation_complete``, advance time
    with ``tick``, and read notifications with ``drain_events``.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        scheduler: Scheduler | None = None,
        codec: PersistenceCodec | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.scheduler = scheduler or Scheduler()
        self.codec = codec or PersistenceCodec()
        self.rng = random.Random(self.config.seed)
        self.score_keeper = ScoreKeeper(
            base_match_score=self.config.base_match_score,
            base_mismatch_penalty=self.config.base_mismatch_penalty,
            combo_bonus=self.config.combo_bonus,
            initial_lives=self.config.initial_lives,
        )
        self.rows = 0
        self.columns = 0
        self.cards: list[CardState] = []
        self.outcome: Outcome = "in_progress"
        self.event_log: list[Event] = []
        self.last_snapshot: Snapshot | None = None
        self._delivered = 0
        self._last_activation: float | None = None
        self.queue = self._new_queue()

    def _new_queue(self) -> MatchQueue:
        return MatchQueue(
            cards=self.cards,
            score=self.score_keeper,
            scheduler=self.scheduler,
            viewing_delay=self.config.viewing_delay,
            on_resolved=self._on_pair_resolved,
        )

    # -------- Read accessors --------
    @property
    def score(self) -> int:
        return self.score_keeper.score

    @property
    def combo(self) -> int:
        return self.score_keeper.combo

    @property
    def lives(self) -> int:
        return self.score_keeper.lives

    @property
    def move_count(self) -> int:
        return self.score_keeper.move_count

    @property
    def total_matches(self) -> int:
        return self.score_keeper.total_matches

    @property
    def total_pairs(self) -> int:
        return len(self.cards) // 2

    @property
    def is_over(self) -> bool:
        return self.outcome in TERMINAL_OUTCOMES

    def index_of(self, row: int, col: int) -> int:
        return row * self.columns + col

    def card_at(self, row: int, col: int) -> CardState:
        return self.cards[self.index_of(row, col)]

    def face_for(self, card_id: int) -> int:
        """Front image index for a card; pairs share an image when faces run out."""
        return self.cards[card_id].pair_key % max(1, self.config.face_count)

    # -------- Lifecycle --------
    def start(self, rows: int | None = None, columns: int | None = None, pair_keys: Sequence[int] | None = None) -> None:
        rows = self.config.rows if rows is None else rows
        columns = self.config.columns if columns is None else columns
        if rows < 1 or columns < 1:
            raise ValueError("Grid needs at least one row and one column.")
        if (rows * columns) % 2 != 0:
            log.warning(
                "Grid size %dx%d has an odd number of cards (%d). Adding one more column.",
                rows,
                columns,
                rows * columns,
            )
            columns += 1

        if pair_keys is None:
            keys = deal_pair_keys(rows, columns, self.rng)
        else:
            validate_pair_keys(pair_keys, rows, columns)
            keys = list(pair_keys)

        needed = (rows * columns) // 2
        if self.config.face_count < needed:
            log.warning(
                "Need %d unique faces but only have %d; some pairs will look alike.",
                needed,
                self.config.face_count,
            )

        self.rows = rows
        self.columns = columns
        # Mutate in place: the queue holds a reference to this list.
        self.cards[:] = [CardState(id=i, pair_key=k) for i, k in enumerate(keys)]
        self.score_keeper.reset()
        self.queue.reset()
        self.outcome = "in_progress"
        self.event_log.clear()
        self._delivered = 0
        self._last_activation = None

    # -------- Collaborator calls --------
    def activate(self, card_id: int) -> bool:
        if self.is_over:
            return False
        if not 0 <= card_id < len(self.cards):
            return False
        card = self.cards[card_id]
        if not card.is_face_down:
            return False
        now = self.scheduler.now
        if self._last_activation is not None and now - self._last_activation < self.config.activation_cooldown:
            return False
        if card.begin_flip("front") is None:
            return False
        self._last_activation = now
        self.event_log.append(CardActivated(card_id))
        self.event_log.append(FlipRequested(card_id, "front"))
        return True

    def on_animation_complete(self, card_id: int) -> None:
        if not 0 <= card_id < len(self.cards):
            return
        done = self.cards[card_id].complete_flip()
        if done is None or done.face != "front":
            return
        if self.is_over:
            return
        self.queue.push(card_id)

    def tick(self, dt: float) -> int:
        return self.scheduler.advance(dt)

    def drain_events(self) -> list[Event]:
        """Return events not yet handed out, oldest first."""
        fresh = self.event_log[self._delivered:]
        self._delivered = len(self.event_log)
        return fresh

    # -------- Resolution --------
    def _on_pair_resolved(self, verdict: PairVerdict) -> None:
        self.event_log.extend(verdict.events)
        if self.is_over:
            # Evaluation scheduled before the game ended; the outcome stands.
            return
        if verdict.matched:
            if self.total_matches >= self.total_pairs:
                self.outcome = "won"
                self.event_log.append(Victory(self.score))
                log.info("victory: score=%d moves=%d", self.score, self.move_count)
                self._autosave()
        elif self.lives == 0:
            self.outcome = "lost"
            self.event_log.append(GameOver(self.score))
            log.info("game over: score=%d moves=%d", self.score, self.move_count)

    def _autosave(self) -> None:
        try:
            self.save()
        except OSError as e:
            log.warning("could not save game: %s", e)

    # -------- Persistence --------
    def save(self) -> Snapshot:
        self.last_snapshot = self.codec.save(self)
        return self.last_snapshot

    def load(self, raw: bytes | str | None = None) -> bool:
        """Restore from the save slot (or ``raw``).

        Only the score is carried over into the live session; moves, matches
        and the board are kept as they are.
        """
        result = self.codec.load(raw)
        if isinstance(result, LoadFailure):
            return False
        self.score_keeper.score = result.score
        return True


def new_session(config: GameConfig | None = None, codec: PersistenceCodec | None = None) -> GameSession:
    session = GameSession(config, codec=codec)
    session.start()
    return session
