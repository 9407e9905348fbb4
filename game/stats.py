"""Per-session answer statistics."""

import logging
from typing import Dict, List, Optional

from game.models import ScoreEvent

logger = logging.getLogger(__name__)


class GameStats:
    """Aggregates score events. Derived metrics are computed on read."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.total_score = 0
        self.correct = 0
        self.incorrect = 0
        self.current_streak = 0
        self.best_streak = 0
        self.response_times: List[float] = []
        self.last_event: Optional[ScoreEvent] = None

    def record(self, event: ScoreEvent, response_time: float) -> None:
        if event.is_correct:
            self.correct += 1
            self.current_streak += 1
            self.best_streak = max(self.best_streak, self.current_streak)
        else:
            self.incorrect += 1
            self.current_streak = 0

        self.response_times.append(response_time)
        self.total_score += event.value
        self.last_event = event

        logger.debug(
            "Stats: score=%d streak=%d accuracy=%.2f answers=%d",
            self.total_score, self.current_streak, self.accuracy, self.total_answers
        )

    @property
    def total_answers(self) -> int:
        return self.correct + self.incorrect

    @property
    def accuracy(self) -> float:
        """Share of correct answers, 0.0 when nothing was answered."""
        if not self.total_answers:
            return 0.0
        return self.correct / self.total_answers

    @property
    def average_response_time(self) -> float:
        if not self.response_times:
            return 0.0
        return sum(self.response_times) / len(self.response_times)

    def snapshot(self) -> Dict:
        return {
            'total_score': self.total_score,
            'correct': self.correct,
            'incorrect': self.incorrect,
            'total_answers': self.total_answers,
            'accuracy': self.accuracy,
            'current_streak': self.current_streak,
            'best_streak': self.best_streak,
            'average_response_time': self.average_response_time,
        }
