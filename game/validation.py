"""Answer validation and feedback dispatch for the three minigames."""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from game.models import GameVariant, Round, ValidationResult
from game.word_stats import WordStatsTracker

logger = logging.getLogger(__name__)

FeedbackSink = Callable[[ValidationResult, Dict[str, Any]], None]


class QuizValidator:
    """The answer is the selected option, by text or by index."""

    def selected_index(self, rnd: Round, answer: Any) -> Optional[int]:
        if isinstance(answer, bool):
            return None
        if isinstance(answer, int):
            return answer if 0 <= answer < len(rnd.options) else None
        # Duplicate option texts: the first one in presentation order wins
        for index, option in enumerate(rnd.options):
            if option == answer:
                return index
        return None

    def selected_text(self, rnd: Round, answer: Any) -> Optional[str]:
        index = self.selected_index(rnd, answer)
        if index is not None:
            return rnd.options[index]
        return answer if isinstance(answer, str) else None

    def validate(self, rnd: Round, answer: Any) -> ValidationResult:
        if self.selected_text(rnd, answer) == rnd.correct_answer:
            return ValidationResult.CORRECT
        return ValidationResult.INCORRECT

    def feedback_context(self, rnd: Round, answer: Any) -> Dict[str, Any]:
        return {
            'selected_option': self.selected_text(rnd, answer),
            'selected_index': self.selected_index(rnd, answer),
        }


class MatchValidator:
    """The answer is the (front, back) pair the player joined."""

    def _pair(self, answer: Any) -> Optional[Tuple[str, str]]:
        if isinstance(answer, (tuple, list)) and len(answer) == 2:
            return answer[0], answer[1]
        return None

    def validate(self, rnd: Round, answer: Any) -> ValidationResult:
        if self._pair(answer) == (rnd.prompt_text, rnd.correct_answer):
            return ValidationResult.CORRECT
        return ValidationResult.INCORRECT

    def feedback_context(self, rnd: Round, answer: Any) -> Dict[str, Any]:
        pair = self._pair(answer)
        return {
            'selected_option': pair[1] if pair else None,
            'selected_index': None,
            'question': pair[0] if pair else None,
        }


class SwipeValidator:
    """The answer is the player's verdict on whether the pair belongs together."""

    def validate(self, rnd: Round, answer: Any) -> ValidationResult:
        if isinstance(answer, bool) and answer == rnd.is_correct_pair:
            return ValidationResult.CORRECT
        return ValidationResult.INCORRECT

    def feedback_context(self, rnd: Round, answer: Any) -> Dict[str, Any]:
        return {
            'selected_option': rnd.shown_answer,
            'selected_index': None,
            'verdict': answer,
        }


VALIDATORS = {
    GameVariant.QUIZ: QuizValidator(),
    GameVariant.MATCH: MatchValidator(),
    GameVariant.SWIPE: SwipeValidator(),
}


class ValidationEngine:
    """Checks answers for one minigame and forwards feedback to a sink."""

    def __init__(
        self,
        variant: GameVariant,
        feedback_sink: Optional[FeedbackSink] = None,
        word_stats: Optional[WordStatsTracker] = None
    ):
        self.variant = GameVariant(variant)
        self.validator = VALIDATORS[self.variant]
        self.feedback_sink = feedback_sink
        self.word_stats = word_stats if word_stats is not None else WordStatsTracker()

    def validate(self, rnd: Round, answer: Any) -> ValidationResult:
        result = self.validator.validate(rnd, answer)
        self.word_stats.record(rnd.prompt_item, result)
        logger.debug("Round %d (%s): %s", rnd.round_id, self.variant.value, result.value)
        return result

    def dispatch_feedback(self, rnd: Round, answer: Any, result: ValidationResult) -> None:
        """Hand the outcome to the feedback sink. Never affects scoring."""
        if self.feedback_sink is None:
            return

        params = self.validator.feedback_context(rnd, answer)
        params['correct_option'] = rnd.correct_answer if result is ValidationResult.INCORRECT else None
        try:
            self.feedback_sink(result, params)
        except Exception:
            logger.exception("Feedback sink failed for round %d", rnd.round_id)
