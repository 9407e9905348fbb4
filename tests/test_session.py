import pytest

from conftest import right_answer, wrong_answer
from game.errors import ConfigurationError, InsufficientContentError
from game.events import GameEvent
from game.models import (
    BonusFlag,
    EndOutcome,
    EndReason,
    GameVariant,
    Practice,
    SessionPhase,
    Survival,
    Time,
    ValidationResult,
    WordItem,
)


def test_submit_before_initialize_is_ignored(make_session):
    session = make_session()
    assert session.phase is SessionPhase.NOT_STARTED
    assert session.submit_answer('dog') is None
    assert session.stats.total_answers == 0


def test_initialize_returns_first_round(make_session):
    session = make_session()
    rnd = session.initialize(Practice())
    assert session.is_active
    assert session.current_round is rnd
    assert rnd.round_id == 1
    assert session.end_reason is EndReason.NONE
    assert session.end_outcome is None


def test_practice_runs_until_quit(make_session, clock):
    session = make_session(GameVariant.MATCH)
    session.initialize(Practice())

    for _ in range(20):
        session.submit_answer(wrong_answer(session.current_round))
        clock.advance(5)

    assert session.is_active
    assert session.stats.incorrect == 20
    assert session.stats.total_score == -100
    assert session.survival_state is None
    assert session.time_state is None


def test_correct_answer_scores_with_streak_and_quick_bonus(make_session, clock):
    session = make_session()
    rnd = session.initialize(Practice())

    clock.advance(1.0)
    outcome = session.submit_answer(right_answer(rnd))

    assert outcome.result is ValidationResult.CORRECT
    assert outcome.response_time == pytest.approx(1.0)
    assert outcome.event.bonus_flags == {BonusFlag.QUICK_RESPONSE, BonusFlag.STREAK}
    # base + quick + streak of one
    assert outcome.event.value == 10 + 5 + 1

    clock.advance(3.0)
    second = session.submit_answer(right_answer(session.current_round))
    assert second.event.bonus_flags == {BonusFlag.STREAK}
    assert second.event.value == 10 + 2
    assert session.stats.total_score == 16 + 12


def test_incorrect_answer_is_penalized_and_breaks_streak(make_session):
    session = make_session()
    session.initialize(Practice())
    session.submit_answer(right_answer(session.current_round))
    outcome = session.submit_answer(wrong_answer(session.current_round))

    assert outcome.result is ValidationResult.INCORRECT
    assert outcome.event.value == -5
    assert session.stats.current_streak == 0
    assert session.stats.best_streak == 1


def test_each_round_is_answered_once(make_session):
    session = make_session()
    first = session.initialize(Practice())

    assert session.submit_answer(right_answer(first), round_id=first.round_id) is not None
    # A late duplicate for the same round is rejected
    assert session.submit_answer(right_answer(first), round_id=first.round_id) is None
    assert session.stats.total_answers == 1
    assert session.current_round.round_id == 2


def test_survival_ends_after_exactly_max_lives_mistakes(make_session):
    session = make_session(GameVariant.SWIPE)
    lives_seen = []
    ended = []
    session.subscribe(GameEvent.LIVES_CHANGED, lambda state: lives_seen.append(state.lives_remaining))
    session.subscribe(GameEvent.GAME_ENDED, ended.append)

    session.initialize(Survival(3))
    assert session.survival_state.lives_remaining == 3

    for expected in (2, 1):
        session.submit_answer(wrong_answer(session.current_round))
        assert session.is_active
        assert session.survival_state.lives_remaining == expected

    session.submit_answer(wrong_answer(session.current_round))

    assert lives_seen == [2, 1, 0]
    assert session.phase is SessionPhase.ENDED
    assert session.end_reason is EndReason.NO_LIVES
    assert session.end_outcome is EndOutcome.SHOW_RESULTS
    assert session.current_round is None
    assert len(ended) == 1
    assert ended[0].stats['incorrect'] == 3

    assert session.submit_answer(True) is None
    assert session.stats.total_answers == 3


def test_survival_correct_answers_keep_lives(make_session):
    session = make_session()
    session.initialize(Survival(1))
    for _ in range(10):
        session.submit_answer(right_answer(session.current_round))
    assert session.is_active
    assert session.survival_state.lives_remaining == 1


def test_time_mode_ends_when_the_timer_runs_out(make_session, clock):
    session = make_session()
    ticks = []
    ended = []
    session.subscribe(GameEvent.TIME_TICK, ticks.append)
    session.subscribe(GameEvent.GAME_ENDED, ended.append)

    session.initialize(Time(60))
    clock.advance(30)
    assert session.is_active
    assert session.time_state.remaining == pytest.approx(30, abs=0.2)

    clock.advance(30.1)

    assert session.phase is SessionPhase.ENDED
    assert session.end_reason is EndReason.TIME_UP
    assert session.end_outcome is EndOutcome.SHOW_RESULTS
    assert len(ended) == 1
    assert ticks
    assert all(earlier.remaining >= later.remaining for earlier, later in zip(ticks, ticks[1:]))
    assert clock.pending == 0


def test_time_mode_answers_are_accepted_while_running(make_session, clock):
    session = make_session(GameVariant.MATCH)
    session.initialize(Time(10))
    for _ in range(5):
        clock.advance(1)
        session.submit_answer(right_answer(session.current_round))
    assert session.stats.correct == 5
    clock.advance(10)
    assert session.end_reason is EndReason.TIME_UP
    assert session.submit_answer(('x', 'y')) is None


def test_end_is_idempotent(make_session):
    session = make_session()
    ended = []
    session.subscribe(GameEvent.GAME_ENDED, ended.append)
    session.initialize(Practice())

    assert session.end(EndReason.USER_QUIT) is True
    assert session.end(EndReason.USER_QUIT) is False
    assert session.end(EndReason.TIME_UP) is False

    assert session.end_reason is EndReason.USER_QUIT
    assert session.end_outcome is EndOutcome.DISCARD
    assert len(ended) == 1
    assert ended[0].outcome is EndOutcome.DISCARD


def test_end_before_start_does_nothing(make_session):
    session = make_session()
    assert session.end(EndReason.USER_QUIT) is False
    assert session.phase is SessionPhase.NOT_STARTED


def test_quit_stops_the_timer(make_session, clock):
    session = make_session()
    session.initialize(Time(60))
    assert session.quit() is True
    assert clock.pending == 0
    clock.advance(120)
    assert session.end_reason is EndReason.USER_QUIT


@pytest.mark.parametrize('mode', [Survival(0), Survival(-1), Time(0), Time(-5)])
def test_invalid_mode_leaves_session_untouched(make_session, mode):
    session = make_session()
    with pytest.raises(ConfigurationError):
        session.initialize(mode)
    assert session.phase is SessionPhase.NOT_STARTED
    assert session.current_round is None


def test_too_few_words_fails_before_starting(make_session):
    session = make_session(GameVariant.QUIZ, words=[WordItem('el sol', 'sun')])
    with pytest.raises(InsufficientContentError):
        session.initialize(Practice())
    assert session.phase is SessionPhase.NOT_STARTED


def test_quiz_pool_without_distinct_answers_fails_before_starting(make_session):
    words = [WordItem('el coche', 'car', word_id=1), WordItem('el auto', 'car', word_id=2)]
    session = make_session(GameVariant.QUIZ, words=words)
    ended = []
    session.subscribe(GameEvent.GAME_ENDED, ended.append)

    with pytest.raises(InsufficientContentError):
        session.initialize(Time(30))

    assert session.phase is SessionPhase.NOT_STARTED
    assert session.end_reason is EndReason.NONE
    assert session.current_round is None
    assert not session.timer.is_running
    assert ended == []


def test_running_out_of_words_mid_game_ends_the_session(make_session):
    session = make_session(GameVariant.MATCH)
    ended = []
    session.subscribe(GameEvent.GAME_ENDED, ended.append)
    session.initialize(Practice())

    session.generator.pool.clear()
    outcome = session.submit_answer(right_answer(session.current_round))

    assert outcome is not None
    assert session.end_reason is EndReason.NO_CONTENT
    assert session.end_outcome is EndOutcome.NO_CONTENT
    assert ended[0].reason is EndReason.NO_CONTENT


def test_reinitialize_cancels_the_previous_timer(make_session, clock):
    session = make_session()
    session.initialize(Time(10))
    clock.advance(5)

    rnd = session.initialize(Time(10))
    assert session.is_active
    assert rnd.round_id > 1

    # The first timer would have fired at t=10
    clock.advance(6)
    assert session.is_active
    assert session.time_state.remaining == pytest.approx(4, abs=0.2)

    clock.advance(4.1)
    assert session.end_reason is EndReason.TIME_UP


def test_reinitialize_from_survival_to_practice(make_session):
    session = make_session(GameVariant.SWIPE)
    session.initialize(Survival(1))
    session.submit_answer(wrong_answer(session.current_round))
    assert session.end_reason is EndReason.NO_LIVES

    session.initialize(Practice())
    assert session.is_active
    assert session.end_reason is EndReason.NONE
    for _ in range(3):
        session.submit_answer(wrong_answer(session.current_round))
    assert session.is_active


def test_events_follow_the_round_flow(make_session):
    session = make_session()
    log = []
    session.subscribe(GameEvent.ROUND_CHANGED, lambda rnd: log.append(('round', rnd.round_id)))
    session.subscribe(GameEvent.SCORE_CHANGED, lambda outcome: log.append(('score', outcome.event.value)))
    session.subscribe(GameEvent.GAME_ENDED, lambda ended: log.append(('ended', ended.reason)))

    session.initialize(Practice())
    session.submit_answer(wrong_answer(session.current_round))
    session.quit()

    assert log == [
        ('round', 1),
        ('score', -5),
        ('round', 2),
        ('ended', EndReason.USER_QUIT),
    ]


def test_feedback_sink_receives_every_answer(make_session):
    received = []
    session = make_session(feedback_sink=lambda result, params: received.append((result, params)))
    session.initialize(Practice())
    rnd = session.current_round

    session.submit_answer(wrong_answer(rnd))

    result, params = received[0]
    assert result is ValidationResult.INCORRECT
    assert params['correct_option'] == rnd.correct_answer
