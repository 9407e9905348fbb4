"""Errors raised by the game engine."""

from typing import Optional


class GameEngineError(Exception):
    """Base class for game engine errors."""


class ConfigurationError(GameEngineError):
    """Raised when a game mode is configured with invalid limits."""


class InsufficientContentError(GameEngineError):
    """Raised when the word pool is too small to build a round."""

    def __init__(self, variant: str, available: int, required: int, message: Optional[str] = None):
        self.variant = variant
        self.available = available
        self.required = required
        super().__init__(
            message or f"Not enough words for {variant}: {available} available, {required} required"
        )
