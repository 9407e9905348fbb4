"""Builds quiz, match and swipe rounds from a word pool."""

import logging
import random
from collections import deque
from typing import Callable, Deque, List, Optional, Sequence

import config
from game.errors import ConfigurationError, InsufficientContentError
from game.models import GameVariant, Round, WordItem

logger = logging.getLogger(__name__)

QUIZ_DIRECTIONS = ('front', 'back', 'random')


class SpecialCardPolicy:
    """Decides which rounds carry the special-card bonus.

    Only words at or below ``weight_threshold`` (not yet well known) are
    eligible; each eligible round is special with probability ``chance``.
    """

    def __init__(
        self,
        chance: float = config.SPECIAL_CARD_CHANCE,
        weight_threshold: int = config.SPECIAL_CARD_WEIGHT_THRESHOLD,
        weight_of: Optional[Callable[[WordItem], int]] = None
    ):
        self.chance = chance
        self.weight_threshold = weight_threshold
        self.weight_of = weight_of or (lambda item: item.weight)

    def roll(self, item: WordItem, rng: random.Random) -> bool:
        if item.is_special:
            return True
        if self.weight_of(item) > self.weight_threshold:
            return False
        return rng.random() < self.chance


class RoundContentGenerator:
    """Produces the next round for one minigame, avoiding immediate repeats."""

    def __init__(
        self,
        pool: Sequence[WordItem],
        variant: GameVariant,
        option_count: int = config.QUIZ_OPTION_COUNT,
        anti_repeat_window: int = config.ANTI_REPEAT_WINDOW,
        swipe_correct_bias: Optional[float] = None,
        quiz_direction: str = 'front',
        special_policy: Optional[SpecialCardPolicy] = None,
        rng: Optional[random.Random] = None
    ):
        if option_count < 2:
            raise ConfigurationError("A quiz needs at least 2 options")
        if swipe_correct_bias is not None and not 0.0 <= swipe_correct_bias <= 1.0:
            raise ConfigurationError("swipe_correct_bias must be between 0 and 1")
        if quiz_direction not in QUIZ_DIRECTIONS:
            raise ConfigurationError(f"Unknown quiz direction: {quiz_direction}")

        self.pool: List[WordItem] = list(pool)
        self.variant = GameVariant(variant)
        self.option_count = option_count
        self.anti_repeat_window = max(0, anti_repeat_window)
        self.swipe_correct_bias = swipe_correct_bias
        self.quiz_direction = quiz_direction
        self.special_policy = special_policy
        self.rng = rng or random.Random()
        self._recent: Deque = deque(maxlen=self.anti_repeat_window or None)

    @property
    def min_words(self) -> int:
        return config.MIN_WORDS[self.variant.value]

    def ensure_ready(self) -> None:
        """Raise InsufficientContentError if the pool cannot produce a round."""
        if len(self.pool) < self.min_words:
            raise InsufficientContentError(self.variant.value, len(self.pool), self.min_words)

    def reset(self) -> None:
        self._recent.clear()

    def next_round(self, round_id: int, presented_at: float) -> Round:
        self.ensure_ready()
        item = self._pick_prompt()

        if self.variant is GameVariant.QUIZ:
            rnd = self._quiz_round(item, round_id, presented_at)
        elif self.variant is GameVariant.MATCH:
            rnd = self._match_round(item, round_id, presented_at)
        else:
            rnd = self._swipe_round(item, round_id, presented_at)

        if self.anti_repeat_window:
            self._recent.append(item.key)
        return rnd

    def _pick_prompt(self) -> WordItem:
        candidates = self.pool
        if self.anti_repeat_window and len(self.pool) > self.anti_repeat_window:
            recent = set(self._recent)
            fresh = [item for item in self.pool if item.key not in recent]
            # Duplicate keys in the pool can still leave nothing fresh
            if fresh:
                candidates = fresh
        return self.rng.choice(candidates)

    def _is_special(self, item: WordItem) -> bool:
        if self.special_policy is None:
            return item.is_special
        return self.special_policy.roll(item, self.rng)

    def _quiz_round(self, item: WordItem, round_id: int, presented_at: float) -> Round:
        direction = self.quiz_direction
        if direction == 'random':
            direction = self.rng.choice(('front', 'back'))

        if direction == 'front':
            prompt, answer = item.front_text, item.back_text
            answer_of = lambda word: word.back_text
        else:
            prompt, answer = item.back_text, item.front_text
            answer_of = lambda word: word.front_text

        # Same language pair first, the rest only to fill up
        pair = (item.front_locale, item.back_locale)
        same_pair = [w for w in self.pool if w is not item and (w.front_locale, w.back_locale) == pair]
        other_pairs = [w for w in self.pool if w is not item and (w.front_locale, w.back_locale) != pair]
        self.rng.shuffle(same_pair)
        self.rng.shuffle(other_pairs)
        others = same_pair + other_pairs

        distractors: List[str] = []
        for word in others:
            text = answer_of(word)
            if text == answer or text in distractors:
                continue
            distractors.append(text)
            if len(distractors) == self.option_count - 1:
                break

        if not distractors:
            raise InsufficientContentError(
                self.variant.value, len(self.pool), 2,
                "No word in the pool has an answer different from the prompt's"
            )
        if len(distractors) < self.option_count - 1:
            logger.debug("Only %d distinct distractors available", len(distractors))

        options = [answer] + distractors
        self.rng.shuffle(options)

        return Round(
            round_id=round_id,
            variant=self.variant,
            prompt_item=item,
            prompt_text=prompt,
            correct_answer=answer,
            presented_at=presented_at,
            distractor_set=tuple(distractors),
            options=tuple(options),
            is_special=self._is_special(item),
        )

    def _match_round(self, item: WordItem, round_id: int, presented_at: float) -> Round:
        return Round(
            round_id=round_id,
            variant=self.variant,
            prompt_item=item,
            prompt_text=item.front_text,
            correct_answer=item.back_text,
            presented_at=presented_at,
            is_special=self._is_special(item),
        )

    def _swipe_round(self, item: WordItem, round_id: int, presented_at: float) -> Round:
        if self.swipe_correct_bias is None:
            should_be_correct = self.rng.random() < 0.5
        else:
            should_be_correct = self.rng.random() < self.swipe_correct_bias

        shown = item.back_text
        is_correct_pair = True
        if not should_be_correct:
            others = [
                word for word in self.pool
                if word.key != item.key and word.back_text != item.back_text
            ]
            if others:
                shown = self.rng.choice(others).back_text
                is_correct_pair = False

        return Round(
            round_id=round_id,
            variant=self.variant,
            prompt_item=item,
            prompt_text=item.front_text,
            correct_answer=item.back_text,
            presented_at=presented_at,
            shown_answer=shown,
            is_correct_pair=is_correct_pair,
            is_special=self._is_special(item),
        )
