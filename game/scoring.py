"""Scoring calculations for flashcard answers."""

import logging

import config
from game.models import BonusFlag, GameVariant, ScoreEvent

logger = logging.getLogger(__name__)


class ScoringEngine:
    """Turns a round outcome into a score event."""

    def __init__(
        self,
        base_score: int = 10,
        quick_response_threshold: float = 2.0,
        quick_response_bonus: int = 5,
        special_card_bonus: int = 5
    ):
        self.base_score = base_score
        self.quick_response_threshold = quick_response_threshold
        self.quick_response_bonus = quick_response_bonus
        self.special_card_bonus = special_card_bonus

    @classmethod
    def for_variant(cls, variant: GameVariant) -> 'ScoringEngine':
        """Build an engine from the configured constants of a minigame."""
        return cls(**config.VARIANT_SCORING[GameVariant(variant).value])

    def score(self, response_time: float, is_special_card: bool, current_streak: int) -> ScoreEvent:
        """
        Calculate the score for a correct answer.

        Args:
            response_time: Seconds between the round being shown and the answer
            is_special_card: Whether the round carried the special-card bonus
            current_streak: Consecutive correct answers, added verbatim

        Returns:
            A single additive ScoreEvent with a flag for every bonus that applied
        """
        total = self.base_score
        flags = set()

        if response_time <= self.quick_response_threshold and self.quick_response_bonus > 0:
            total += self.quick_response_bonus
            flags.add(BonusFlag.QUICK_RESPONSE)

        if is_special_card and self.special_card_bonus > 0:
            total += self.special_card_bonus
            flags.add(BonusFlag.SPECIAL_CARD)

        if current_streak > 0:
            total += current_streak
            flags.add(BonusFlag.STREAK)

        event = ScoreEvent(value=total, is_correct=True, bonus_flags=frozenset(flags))
        logger.debug("Score %d (%s)", event.value, event.score_type.value)
        return event

    def penalty(self) -> int:
        """Points lost for an incorrect answer."""
        return self.base_score // 2

    def penalty_event(self) -> ScoreEvent:
        return ScoreEvent(value=-self.penalty(), is_correct=False)
