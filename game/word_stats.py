"""Per-word success/fail counters and the weight derived from them."""

from dataclasses import dataclass
from typing import Dict, Hashable

import config
from game.models import ValidationResult, WordItem


def calculate_weight(success: int, fail: int) -> int:
    """Map a word's history to 0..1000; 500 means no history or an even record."""
    total = success + fail
    if total <= 0:
        return config.WORD_WEIGHT_DEFAULT
    ratio = (success - fail) / total
    weight = int(500 + 500 * ratio)
    return min(config.WORD_WEIGHT_MAX, max(0, weight))


@dataclass
class WordRecord:
    success: int = 0
    fail: int = 0

    @property
    def weight(self) -> int:
        return calculate_weight(self.success, self.fail)


class WordStatsTracker:
    """Keeps answer history for every word seen during play."""

    def __init__(self):
        self._records: Dict[Hashable, WordRecord] = {}

    def record(self, item: WordItem, result: ValidationResult) -> WordRecord:
        entry = self._records.setdefault(item.key, WordRecord())
        if result is ValidationResult.CORRECT:
            entry.success += 1
        else:
            entry.fail += 1
        return entry

    def get(self, item: WordItem) -> WordRecord:
        return self._records.get(item.key, WordRecord())

    def weight_of(self, item: WordItem) -> int:
        """Tracked weight, or the weight the provider shipped for an unseen word."""
        entry = self._records.get(item.key)
        return entry.weight if entry else item.weight

    def __len__(self) -> int:
        return len(self._records)
