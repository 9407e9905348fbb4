"""Subscribe-style event channel for session observers."""

import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class GameEvent(str, Enum):
    ROUND_CHANGED = 'round_changed'
    SCORE_CHANGED = 'score_changed'
    GAME_ENDED = 'game_ended'
    TIME_TICK = 'time_tick'
    LIVES_CHANGED = 'lives_changed'


Handler = Callable[[Any], None]


class EventEmitter:
    """Delivers session events to subscribed handlers, in subscription order."""

    def __init__(self):
        self._handlers: Dict[GameEvent, List[Handler]] = defaultdict(list)

    def subscribe(self, event: GameEvent, handler: Handler) -> Callable[[], None]:
        """Register a handler. Returns a function that unsubscribes it."""
        self._handlers[event].append(handler)

        def unsubscribe():
            try:
                self._handlers[event].remove(handler)
            except ValueError:
                pass

        return unsubscribe

    def emit(self, event: GameEvent, payload: Any = None) -> None:
        for handler in list(self._handlers[event]):
            try:
                handler(payload)
            except Exception:
                # Observers must not be able to break the game loop
                logger.exception("Handler for %s failed", event.value)

    def clear(self) -> None:
        self._handlers.clear()
