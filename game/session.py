"""Game session: mode setup, round flow and end-of-game handling."""

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Optional

from game.clock import Clock
from game.errors import InsufficientContentError
from game.events import EventEmitter, GameEvent
from game.generator import RoundContentGenerator
from game.lives import LivesTracker
from game.models import (
    EndOutcome,
    EndReason,
    GameMode,
    Round,
    ScoreEvent,
    SessionPhase,
    Survival,
    SurvivalState,
    Time,
    TimeState,
    ValidationResult,
)
from game.scoring import ScoringEngine
from game.stats import GameStats
from game.timer import TimerService
from game.validation import ValidationEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerOutcome:
    """What happened to a submitted answer."""
    round: Round
    result: ValidationResult
    event: ScoreEvent
    response_time: float


@dataclass(frozen=True)
class GameEnded:
    reason: EndReason
    outcome: EndOutcome
    stats: dict


class GameSession:
    """One play attempt, from ``initialize`` to ``end``.

    The session owns the current round and the Survival/Time sub-state. All
    collaborators are injected so tests can drive it with a ``ManualClock``
    and a seeded generator.
    """

    def __init__(
        self,
        generator: RoundContentGenerator,
        scoring: ScoringEngine,
        validation: ValidationEngine,
        clock: Clock,
        timer: Optional[TimerService] = None,
        lives: Optional[LivesTracker] = None,
        stats: Optional[GameStats] = None,
        emitter: Optional[EventEmitter] = None
    ):
        self.generator = generator
        self.scoring = scoring
        self.validation = validation
        self.clock = clock
        self.timer = timer or TimerService(clock)
        self.lives = lives or LivesTracker()
        self.stats = stats or GameStats()
        self.events = emitter or EventEmitter()

        self.phase = SessionPhase.NOT_STARTED
        self.end_reason = EndReason.NONE
        self.mode: Optional[GameMode] = None
        self.current_round: Optional[Round] = None
        self._round_ids = itertools.count(1)
        self._attempt = 0  # incremented per initialize, guards timer callbacks

    # Read-only views

    @property
    def is_active(self) -> bool:
        return self.phase is SessionPhase.ACTIVE

    @property
    def end_outcome(self) -> Optional[EndOutcome]:
        return self.end_reason.outcome

    @property
    def survival_state(self) -> Optional[SurvivalState]:
        if isinstance(self.mode, Survival):
            return self.lives.state
        return None

    @property
    def time_state(self) -> Optional[TimeState]:
        if isinstance(self.mode, Time):
            return self.timer.state
        return None

    def subscribe(self, event: GameEvent, handler):
        return self.events.subscribe(event, handler)

    # Lifecycle

    def initialize(self, mode: GameMode) -> Round:
        """Start (or restart) the session in ``mode`` and return the first round.

        Raises ConfigurationError or InsufficientContentError before any state
        changes, so a failed start leaves no partial session behind.
        """
        mode.validate()
        self.generator.ensure_ready()
        # A pool can be large enough and still unable to build a round
        self.generator.reset()
        first_round = self.generator.next_round(next(self._round_ids), self.clock.now())

        self.timer.stop()
        self._attempt += 1
        attempt = self._attempt

        self.mode = mode
        self.phase = SessionPhase.ACTIVE
        self.end_reason = EndReason.NONE
        self.current_round = None

        if isinstance(mode, Survival):
            self.lives.reset(mode.max_lives)
            self.lives.on_exhausted = lambda: self._on_lives_exhausted(attempt)
        elif isinstance(mode, Time):
            self.timer.start(
                mode.duration,
                on_tick=lambda remaining: self._on_tick(attempt, remaining),
                on_expired=lambda: self._end_if_current(attempt, EndReason.TIME_UP),
            )

        logger.info("Session started: mode=%s variant=%s", mode.name, self.generator.variant.value)
        self._present(first_round)
        return first_round

    def start(self, mode: GameMode) -> Round:
        return self.initialize(mode)

    def submit_answer(self, answer: Any, round_id: Optional[int] = None) -> Optional[AnswerOutcome]:
        """Validate and score ``answer`` for the current round.

        Returns None (and changes nothing) when there is no round to answer:
        the session is not active, or ``round_id`` names a round that is no
        longer current.
        """
        if self.phase is not SessionPhase.ACTIVE or self.current_round is None:
            logger.warning("Answer ignored: session is %s", self.phase.value)
            return None
        if round_id is not None and round_id != self.current_round.round_id:
            logger.warning(
                "Late answer for round %s ignored (current round %s)",
                round_id, self.current_round.round_id
            )
            return None

        rnd = self.current_round
        # Nothing else may answer this round
        self.current_round = None

        response_time = max(0.0, self.clock.now() - rnd.presented_at)
        result = self.validation.validate(rnd, answer)
        self.validation.dispatch_feedback(rnd, answer, result)

        if result is ValidationResult.CORRECT:
            # The streak includes this answer
            event = self.scoring.score(response_time, rnd.is_special, self.stats.current_streak + 1)
        else:
            event = self.scoring.penalty_event()

        self.stats.record(event, response_time)
        outcome = AnswerOutcome(round=rnd, result=result, event=event, response_time=response_time)
        self.events.emit(GameEvent.SCORE_CHANGED, outcome)

        if result is ValidationResult.INCORRECT and isinstance(self.mode, Survival):
            # Reaching zero ends the session from inside decrement()
            if self.lives.decrement() > 0:
                self.events.emit(GameEvent.LIVES_CHANGED, self.lives.state)

        # Lives or the timer may have ended the game above
        if self.phase is SessionPhase.ACTIVE:
            self._advance()
        return outcome

    def end(self, reason: EndReason) -> bool:
        """End the session once. Later calls are no-ops and return False."""
        if self.phase is not SessionPhase.ACTIVE:
            logger.debug("end(%s) ignored: session is %s", reason.value, self.phase.value)
            return False

        self.timer.stop()
        self.phase = SessionPhase.ENDED
        self.end_reason = reason
        self.current_round = None

        logger.info(
            "Session ended: reason=%s mode=%s score=%d",
            reason.value, self.mode.name if self.mode else None, self.stats.total_score
        )
        self.events.emit(
            GameEvent.GAME_ENDED,
            GameEnded(reason=reason, outcome=reason.outcome, stats=self.stats.snapshot()),
        )
        return True

    def quit(self) -> bool:
        return self.end(EndReason.USER_QUIT)

    # Internals

    def _advance(self) -> None:
        try:
            rnd = self.generator.next_round(next(self._round_ids), self.clock.now())
        except InsufficientContentError:
            logger.exception("Cannot build the next round")
            self.end(EndReason.NO_CONTENT)
            return
        self._present(rnd)

    def _present(self, rnd: Round) -> None:
        self.current_round = rnd
        self.events.emit(GameEvent.ROUND_CHANGED, rnd)

    def _on_tick(self, attempt: int, remaining: float) -> None:
        if attempt == self._attempt and self.is_active:
            self.events.emit(GameEvent.TIME_TICK, TimeState(remaining=remaining, total=self.timer.total))

    def _on_lives_exhausted(self, attempt: int) -> None:
        if attempt == self._attempt:
            self.events.emit(GameEvent.LIVES_CHANGED, self.lives.state)
            self.end(EndReason.NO_LIVES)

    def _end_if_current(self, attempt: int, reason: EndReason) -> None:
        if attempt == self._attempt:
            self.end(reason)
