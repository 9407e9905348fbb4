import random

from game.models import ScoreEvent
from game.stats import GameStats

CORRECT = ScoreEvent(value=10, is_correct=True)
WRONG = ScoreEvent(value=-5, is_correct=False)


def test_empty_stats():
    stats = GameStats()
    assert stats.accuracy == 0.0
    assert stats.average_response_time == 0.0
    assert stats.total_answers == 0


def test_streaks_and_totals():
    stats = GameStats()
    for event in (CORRECT, CORRECT, CORRECT, WRONG, CORRECT):
        stats.record(event, 1.0)

    assert stats.correct == 4
    assert stats.incorrect == 1
    assert stats.current_streak == 1
    assert stats.best_streak == 3
    assert stats.total_score == 4 * 10 - 5
    assert stats.last_event == CORRECT


def test_derived_metrics():
    stats = GameStats()
    stats.record(CORRECT, 1.0)
    stats.record(WRONG, 3.0)
    assert stats.accuracy == 0.5
    assert stats.average_response_time == 2.0


def test_total_score_can_go_negative():
    stats = GameStats()
    stats.record(WRONG, 1.0)
    assert stats.total_score == -5


def test_invariants_hold_for_random_sequences():
    rng = random.Random(7)
    stats = GameStats()
    for _ in range(500):
        stats.record(CORRECT if rng.random() < 0.6 else WRONG, rng.uniform(0.2, 5.0))
        assert stats.accuracy == stats.correct / (stats.correct + stats.incorrect)
        assert stats.best_streak >= stats.current_streak


def test_reset():
    stats = GameStats()
    stats.record(CORRECT, 1.0)
    stats.reset()
    assert stats.snapshot() == {
        'total_score': 0,
        'correct': 0,
        'incorrect': 0,
        'total_answers': 0,
        'accuracy': 0.0,
        'current_streak': 0,
        'best_streak': 0,
        'average_response_time': 0.0,
    }
    assert stats.response_times == []
