from __future__ import annotations

import pytest

from tilematch.engine.card import CardState
from tilematch.engine.events import CardMatched, FlipCompleted, FlipStarted, MatchFound, event_name
from tilematch.engine.match_queue import MatchQueue, PairingError, PairVerdict
from tilematch.engine.scheduler import Scheduler
from tilematch.engine.scoring import ScoreKeeper


def _face_up(card_id: int, pair_key: int) -> CardState:
    card = CardState(id=card_id, pair_key=pair_key)
    card.begin_flip("front")
    card.complete_flip()
    return card


# -------- CardState --------


def test_card_flip_cycle() -> None:
    card = CardState(id=4, pair_key=1)
    assert card.begin_flip("front") == FlipStarted(4, "front")
    assert card.is_flipping
    assert card.complete_flip() == FlipCompleted(4, "front")
    assert card.is_face_up
    assert card.begin_flip("back") == FlipStarted(4, "back")
    assert card.complete_flip() == FlipCompleted(4, "back")
    assert card.is_face_down
    assert card.target is None


def test_begin_flip_is_ignored_while_flipping_or_matched() -> None:
    card = CardState(id=0, pair_key=0)
    card.begin_flip("front")
    assert card.begin_flip("back") is None
    assert card.target == "front"

    card.complete_flip()
    assert card.mark_matched() == CardMatched(0)
    assert card.begin_flip("back") is None
    assert card.begin_flip("front") is None
    assert card.is_matched


def test_begin_flip_toward_current_face_is_ignored() -> None:
    card = CardState(id=0, pair_key=0)
    assert card.begin_flip("back") is None
    assert card.is_face_down
    card = _face_up(1, 0)
    assert card.begin_flip("front") is None
    assert card.is_face_up


def test_complete_flip_outside_flipping_is_noop() -> None:
    card = CardState(id=0, pair_key=0)
    assert card.complete_flip() is None
    assert card.is_face_down
    card = _face_up(1, 0)
    assert card.complete_flip() is None
    assert card.is_face_up


def test_mark_matched_requires_face_up() -> None:
    card = CardState(id=0, pair_key=0)
    assert card.mark_matched() is None
    card.begin_flip("front")
    assert card.mark_matched() is None
    assert card.is_flipping


# -------- ScoreKeeper --------


def test_combo_escalates_and_mismatch_resets() -> None:
    sk = ScoreKeeper(base_match_score=100, base_mismatch_penalty=10, combo_bonus=50, initial_lives=3)
    assert sk.apply_match() == 150
    assert sk.apply_match() == 200
    assert (sk.score, sk.combo, sk.total_matches) == (350, 2, 2)
    sk.apply_mismatch()
    assert (sk.score, sk.combo, sk.lives) == (340, 0, 2)
    assert sk.apply_match() == 150


def test_lives_and_score_floor_at_zero() -> None:
    sk = ScoreKeeper(base_mismatch_penalty=25, initial_lives=1)
    sk.apply_mismatch()
    sk.apply_mismatch()
    assert sk.lives == 0
    assert sk.score == 0


def test_reset_restores_initial_lives() -> None:
    sk = ScoreKeeper(initial_lives=4)
    sk.apply_match()
    sk.apply_mismatch()
    sk.record_move()
    sk.reset()
    assert (sk.score, sk.combo, sk.move_count, sk.total_matches, sk.lives) == (0, 0, 0, 0, 4)


def test_negative_configuration_is_rejected() -> None:
    with pytest.raises(ValueError):
        ScoreKeeper(combo_bonus=-1)


# -------- Scheduler --------


def test_scheduler_fires_in_due_order() -> None:
    sched = Scheduler()
    fired: list[str] = []
    sched.call_later(0.5, lambda: fired.append("b"))
    sched.call_later(0.25, lambda: fired.append("a"))
    sched.call_later(0.5, lambda: fired.append("c"))
    assert sched.advance(0.25) == 1
    assert fired == ["a"]
    assert sched.advance(1.0) == 2
    assert fired == ["a", "b", "c"]
    assert sched.pending == 0
    assert sched.now == 1.25


def test_scheduler_runs_callbacks_scheduled_while_advancing() -> None:
    sched = Scheduler()
    seen: list[float] = []

    def first() -> None:
        seen.append(sched.now)
        sched.call_later(0.25, lambda: seen.append(sched.now))

    sched.call_later(0.5, first)
    sched.advance(1.0)
    assert seen == [0.5, 0.75]


# -------- MatchQueue --------


def _queue(cards: list[CardState], delay: float = 0.5) -> tuple[MatchQueue, Scheduler, list[PairVerdict]]:
    sched = Scheduler()
    verdicts: list[PairVerdict] = []
    q = MatchQueue(cards, ScoreKeeper(), sched, delay, verdicts.append)
    return q, sched, verdicts


def test_push_is_idempotent_for_pending_card() -> None:
    q, _, _ = _queue([_face_up(0, 0), _face_up(1, 0)])
    assert not q.push(0)
    assert not q.push(0)
    assert q.pending == (0,)


def test_second_card_frees_queue_and_schedules_evaluation() -> None:
    cards = [_face_up(0, 0), _face_up(1, 0)]
    q, sched, verdicts = _queue(cards)
    q.push(0)
    assert q.push(1)
    assert q.pending == ()
    assert q.in_flight == 1
    sched.advance(0.5)
    assert q.in_flight == 0
    assert verdicts == [PairVerdict(0, 1, matched=True, events=[MatchFound(0, 1)])]
    assert cards[0].is_matched and cards[1].is_matched


def test_pairing_a_card_with_itself_is_a_contract_violation() -> None:
    q, _, _ = _queue([_face_up(0, 0), _face_up(1, 0)])
    with pytest.raises(PairingError):
        q.evaluate(0, 0)


def test_event_names() -> None:
    assert event_name(MatchFound(0, 1)) == "MATCH_FOUND"
