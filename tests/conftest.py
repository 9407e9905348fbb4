import random

import pytest

from game.clock import ManualClock
from game.generator import RoundContentGenerator
from game.lives import LivesTracker
from game.models import GameVariant, WordItem
from game.scoring import ScoringEngine
from game.session import GameSession
from game.timer import TimerService
from game.validation import ValidationEngine

WORDS = [
    ('el perro', 'dog'),
    ('el gato', 'cat'),
    ('el caballo', 'horse'),
    ('la vaca', 'cow'),
    ('el oso', 'bear'),
    ('la oveja', 'sheep'),
]


@pytest.fixture()
def pool():
    return [
        WordItem(front_text=front, back_text=back, front_locale='es', back_locale='en', word_id=i)
        for i, (front, back) in enumerate(WORDS, 1)
    ]


@pytest.fixture()
def clock():
    return ManualClock()


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def make_session(pool, clock, rng):
    """Build a session with deterministic collaborators."""
    def _make(variant=GameVariant.QUIZ, words=None, feedback_sink=None, **generator_kwargs):
        generator = RoundContentGenerator(
            pool if words is None else words, variant, rng=rng, **generator_kwargs
        )
        return GameSession(
            generator=generator,
            scoring=ScoringEngine(base_score=10, quick_response_threshold=2.0,
                                  quick_response_bonus=5, special_card_bonus=5),
            validation=ValidationEngine(variant, feedback_sink=feedback_sink),
            clock=clock,
            timer=TimerService(clock, tick_interval=0.1),
            lives=LivesTracker(),
        )
    return _make


def wrong_answer(rnd):
    """An answer that is incorrect for any round variant."""
    if rnd.variant is GameVariant.QUIZ:
        return next(option for option in rnd.options if option != rnd.correct_answer)
    if rnd.variant is GameVariant.MATCH:
        return (rnd.prompt_text, rnd.correct_answer + ' (wrong)')
    return not rnd.is_correct_pair


def right_answer(rnd):
    if rnd.variant is GameVariant.QUIZ:
        return rnd.correct_answer
    if rnd.variant is GameVariant.MATCH:
        return (rnd.prompt_text, rnd.correct_answer)
    return rnd.is_correct_pair
