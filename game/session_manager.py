"""Manages active game sessions."""

import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

from game.clock import AsyncioClock, Clock
from game.generator import RoundContentGenerator, SpecialCardPolicy
from game.models import GameVariant, WordItem
from game.scoring import ScoringEngine
from game.session import GameSession
from game.validation import FeedbackSink, ValidationEngine
from game.word_stats import WordStatsTracker

logger = logging.getLogger(__name__)


def build_session(
    pool: Sequence[WordItem],
    variant: GameVariant,
    clock: Clock,
    feedback_sink: Optional[FeedbackSink] = None,
    word_stats: Optional[WordStatsTracker] = None,
    rng: Optional[random.Random] = None
) -> GameSession:
    """Wire a session for one minigame with the configured defaults."""
    variant = GameVariant(variant)
    word_stats = word_stats if word_stats is not None else WordStatsTracker()
    rng = rng or random.Random()

    generator = RoundContentGenerator(
        pool,
        variant,
        special_policy=SpecialCardPolicy(weight_of=word_stats.weight_of),
        rng=rng,
    )
    return GameSession(
        generator=generator,
        scoring=ScoringEngine.for_variant(variant),
        validation=ValidationEngine(variant, feedback_sink=feedback_sink, word_stats=word_stats),
        clock=clock,
    )


class SessionManager:
    """Tracks the running game of each player in each channel."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or AsyncioClock()
        # (player_id, channel_id) -> session
        self._sessions: Dict[Tuple[str, str], GameSession] = {}
        # Word history survives between games of the same player
        self._word_stats: Dict[str, WordStatsTracker] = {}

    def create_session(
        self,
        player_id: str,
        channel_id: str,
        pool: Sequence[WordItem],
        variant: GameVariant,
        feedback_sink: Optional[FeedbackSink] = None,
        rng: Optional[random.Random] = None
    ) -> GameSession:
        """Create a session, replacing any previous one for the same key."""
        key = (player_id, channel_id)
        previous = self._sessions.pop(key, None)
        if previous is not None:
            previous.quit()

        word_stats = self._word_stats.setdefault(player_id, WordStatsTracker())
        session = build_session(pool, variant, self.clock, feedback_sink, word_stats, rng)
        self._sessions[key] = session
        logger.debug("Session created for player=%s channel=%s", player_id, channel_id)
        return session

    def get_session(self, player_id: str, channel_id: str) -> Optional[GameSession]:
        """Get the active session of a player in a channel."""
        session = self._sessions.get((player_id, channel_id))
        if session and session.is_active:
            return session
        return None

    def end_session(self, player_id: str, channel_id: str) -> Optional[GameSession]:
        """Quit the session (if still running) and forget it."""
        session = self._sessions.pop((player_id, channel_id), None)
        if session:
            session.quit()
        return session

    def discard(self, player_id: str, channel_id: str, session: GameSession) -> None:
        """Forget ``session`` if it is still the one registered under the key."""
        key = (player_id, channel_id)
        if self._sessions.get(key) is session:
            del self._sessions[key]

    def is_active(self, player_id: str, channel_id: str) -> bool:
        return self.get_session(player_id, channel_id) is not None

    def get_all_sessions(self) -> List[GameSession]:
        return [s for s in self._sessions.values() if s.is_active]


# Global session manager instance
session_manager = SessionManager()
