from __future__ import annotations

from datetime import datetime

from tilematch.engine.autoplay import Autoplayer, AutoplaySpec, play_headless
from tilematch.engine.serialize import snapshot
from tilematch.engine.session import GameConfig, GameSession

FIXED = datetime(2024, 1, 1, 12, 0, 0)


def _run(seed: int, spec: AutoplaySpec) -> GameSession:
    session = GameSession(GameConfig(rows=3, columns=4, seed=seed))
    session.start()
    play_headless(session, Autoplayer(spec))
    return session


def test_autoplay_replay_is_deterministic() -> None:
    spec = AutoplaySpec(recall=0.5, seed=99)
    s1 = _run(424242, spec)
    s2 = _run(424242, spec)

    assert s1.is_over
    assert s1.outcome == s2.outcome
    assert snapshot(s1, now=FIXED) == snapshot(s2, now=FIXED)
    assert s1.event_log == s2.event_log


def test_perfect_memory_player_wins() -> None:
    s = _run(7, AutoplaySpec(recall=1.0, seed=3))
    assert s.outcome == "won"
    assert s.total_matches == s.total_pairs
    assert all(c.is_matched for c in s.cards)
    # Each mismatch uncovers two cards it had never seen.
    assert s.lives >= s.config.initial_lives - s.total_pairs
    assert s.last_snapshot is not None


def test_restart_clears_autoplayer_memory() -> None:
    cfg = GameConfig(rows=2, columns=2, activation_cooldown=0.0, seed=1)
    s = GameSession(cfg)
    s.start(pair_keys=[0, 1, 0, 1])
    player = Autoplayer(AutoplaySpec(recall=1.0, seed=0))
    for card in s.cards:
        card.begin_flip("front")
        card.complete_flip()
    player.observe(s)
    assert player.choose(s) is None  # nothing left face down

    s.start(pair_keys=[0, 0, 1, 1])
    player.reset()
    player.observe(s)
    assert player._known == {}

    assert play_headless(s, player) == "won"
    # Perfect recall on a fresh board never mismatches more than once per pair.
    assert s.lives >= cfg.initial_lives - s.total_pairs
