"""Game data structures: modes, phases, rounds and score events."""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple, Union

import config
from game.errors import ConfigurationError


class GameVariant(str, Enum):
    """The three minigames a round can be built for."""
    QUIZ = 'quiz'
    MATCH = 'match'
    SWIPE = 'swipe'


class SessionPhase(str, Enum):
    NOT_STARTED = 'not_started'
    ACTIVE = 'active'
    ENDED = 'ended'


class EndOutcome(str, Enum):
    """What the caller should do once a session has ended."""
    SHOW_RESULTS = 'show_results'
    DISCARD = 'discard'
    NO_CONTENT = 'no_content'


class EndReason(str, Enum):
    NONE = 'none'
    TIME_UP = 'time_up'
    NO_LIVES = 'no_lives'
    USER_QUIT = 'user_quit'
    NO_CONTENT = 'no_content'

    @property
    def outcome(self) -> Optional[EndOutcome]:
        if self in (EndReason.TIME_UP, EndReason.NO_LIVES):
            return EndOutcome.SHOW_RESULTS
        if self is EndReason.USER_QUIT:
            return EndOutcome.DISCARD
        if self is EndReason.NO_CONTENT:
            return EndOutcome.NO_CONTENT
        return None


class ValidationResult(str, Enum):
    CORRECT = 'correct'
    INCORRECT = 'incorrect'


class BonusFlag(str, Enum):
    QUICK_RESPONSE = 'quick_response'
    SPECIAL_CARD = 'special_card'
    STREAK = 'streak'


class ScoreType(str, Enum):
    """Classification of a score event for display and analytics."""
    REGULAR = 'regular'
    FAST_RESPONSE = 'fast_response'
    SPECIAL_CARD = 'special_card'
    STREAK_BONUS = 'streak_bonus'
    MULTIPLE = 'multiple'
    PENALTY = 'penalty'


_SINGLE_BONUS_TYPES = {
    BonusFlag.QUICK_RESPONSE: ScoreType.FAST_RESPONSE,
    BonusFlag.SPECIAL_CARD: ScoreType.SPECIAL_CARD,
    BonusFlag.STREAK: ScoreType.STREAK_BONUS,
}


# Game modes

@dataclass(frozen=True)
class Practice:
    name = 'practice'

    def validate(self) -> None:
        pass


@dataclass(frozen=True)
class Survival:
    max_lives: int = config.DEFAULT_SURVIVAL_LIVES
    name = 'survival'

    def validate(self) -> None:
        if self.max_lives < 1:
            raise ConfigurationError(f"Survival mode needs at least 1 life, got {self.max_lives}")
        if self.max_lives > config.MAX_SURVIVAL_LIVES:
            raise ConfigurationError(
                f"Survival mode allows at most {config.MAX_SURVIVAL_LIVES} lives, got {self.max_lives}"
            )


@dataclass(frozen=True)
class Time:
    duration: float = config.DEFAULT_TIME_DURATION
    name = 'time'

    def validate(self) -> None:
        if self.duration <= 0:
            raise ConfigurationError(f"Time mode needs a positive duration, got {self.duration}")


GameMode = Union[Practice, Survival, Time]


def mode_from_name(name: str, lives: Optional[int] = None, duration: Optional[float] = None) -> GameMode:
    """Build a game mode from its name, falling back to configured defaults."""
    name = name.lower()
    if name == 'practice':
        return Practice()
    if name == 'survival':
        return Survival(lives if lives is not None else config.DEFAULT_SURVIVAL_LIVES)
    if name == 'time':
        return Time(duration if duration is not None else config.DEFAULT_TIME_DURATION)
    raise ConfigurationError(f"Unknown game mode: {name}")


# Content

@dataclass(frozen=True)
class WordItem:
    """A single flashcard as delivered by a word-pool provider."""
    front_text: str
    back_text: str
    front_locale: str = 'en'
    back_locale: str = 'en'
    is_special: bool = False
    word_id: Optional[int] = None
    weight: int = config.WORD_WEIGHT_DEFAULT

    @property
    def key(self):
        if self.word_id is not None:
            return self.word_id
        return (self.front_text, self.back_text)


@dataclass(frozen=True)
class Round:
    """One presented prompt awaiting exactly one answer."""
    round_id: int
    variant: GameVariant
    prompt_item: WordItem
    prompt_text: str
    correct_answer: str
    presented_at: float
    distractor_set: Tuple[str, ...] = ()
    options: Tuple[str, ...] = ()
    is_special: bool = False

    # Swipe only
    shown_answer: Optional[str] = None
    is_correct_pair: bool = True


@dataclass(frozen=True)
class ScoreEvent:
    value: int
    is_correct: bool
    bonus_flags: FrozenSet[BonusFlag] = field(default_factory=frozenset)

    @property
    def score_type(self) -> ScoreType:
        if not self.is_correct:
            return ScoreType.PENALTY
        if len(self.bonus_flags) > 1:
            return ScoreType.MULTIPLE
        for flag in self.bonus_flags:
            return _SINGLE_BONUS_TYPES[flag]
        return ScoreType.REGULAR


@dataclass(frozen=True)
class SurvivalState:
    lives_remaining: int
    initial_lives: int


@dataclass(frozen=True)
class TimeState:
    remaining: float
    total: float
