"""Lives counter for Survival mode."""

import logging
from typing import Callable, Optional

import config
from game.models import SurvivalState

logger = logging.getLogger(__name__)


class LivesTracker:
    """Counts down lives and signals once when none are left."""

    def __init__(
        self,
        initial_lives: int = config.DEFAULT_SURVIVAL_LIVES,
        on_exhausted: Optional[Callable[[], None]] = None
    ):
        self.initial_lives = initial_lives
        self.lives_remaining = initial_lives
        self.on_exhausted = on_exhausted
        self._signalled = False

    @property
    def is_exhausted(self) -> bool:
        return self.lives_remaining <= 0

    @property
    def state(self) -> SurvivalState:
        return SurvivalState(lives_remaining=self.lives_remaining, initial_lives=self.initial_lives)

    def decrement(self) -> int:
        """Lose one life. Returns the lives left."""
        if self.lives_remaining > 0:
            self.lives_remaining -= 1
            logger.debug("Life lost: %d/%d remaining", self.lives_remaining, self.initial_lives)

        if self.lives_remaining == 0 and not self._signalled:
            self._signalled = True
            logger.debug("No lives left")
            if self.on_exhausted:
                self.on_exhausted()

        return self.lives_remaining

    def reset(self, initial_lives: Optional[int] = None) -> None:
        if initial_lives is not None:
            self.initial_lives = initial_lives
        self.lives_remaining = self.initial_lives
        self._signalled = False
