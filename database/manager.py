"""Database operations manager."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

import aiosqlite

import config
from game.models import EndReason, GameMode, GameVariant
from game.stats import GameStats

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages all database operations."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or config.DATABASE_PATH

    def _get_connection(self) -> aiosqlite.Connection:
        """Get database connection."""
        return aiosqlite.connect(self.db_path)

    # Player operations
    async def get_or_create_player(self, user_id: str, username: str) -> Dict:
        """Get or create a player record."""
        async with self._get_connection() as db:
            async with db.execute(
                "SELECT * FROM players WHERE user_id = ?",
                (user_id,)
            ) as cursor:
                row = await cursor.fetchone()
                if row:
                    return self._player_row(row)

            await db.execute(
                """
                INSERT INTO players (user_id, username, last_played)
                VALUES (?, ?, ?)
                """,
                (user_id, username, datetime.now(timezone.utc).isoformat())
            )
            await db.commit()

        return await self.get_or_create_player(user_id, username)

    async def get_player_stats(self, user_id: str) -> Optional[Dict]:
        """Get a player's totals plus a per-minigame breakdown."""
        async with self._get_connection() as db:
            async with db.execute(
                "SELECT * FROM players WHERE user_id = ?",
                (user_id,)
            ) as cursor:
                row = await cursor.fetchone()
                if not row:
                    return None

            async with db.execute(
                """
                SELECT variant,
                       COUNT(*) as games,
                       AVG(accuracy) as avg_accuracy,
                       MAX(total_score) as best_score
                FROM game_sessions
                WHERE user_id = ?
                GROUP BY variant
                """,
                (user_id,)
            ) as cursor:
                variant_stats = {}
                async for row2 in cursor:
                    variant_stats[row2[0]] = {
                        'games': row2[1],
                        'avg_accuracy': row2[2] or 0.0,
                        'best_score': row2[3] or 0
                    }

        player = self._player_row(row)
        player['variant_stats'] = variant_stats
        return player

    # Game results
    async def save_game_result(
        self,
        user_id: str,
        variant: GameVariant,
        mode: GameMode,
        end_reason: EndReason,
        stats: GameStats,
        server_id: Optional[str] = None,
        channel_id: Optional[str] = None
    ) -> str:
        """Save a finished game and fold it into the player's totals."""
        session_id = str(uuid.uuid4())

        async with self._get_connection() as db:
            await db.execute(
                """
                INSERT INTO game_sessions
                (session_id, user_id, server_id, channel_id, variant, mode, end_reason,
                 total_score, correct, incorrect, accuracy, best_streak, average_response_time)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    session_id, user_id, server_id, channel_id,
                    GameVariant(variant).value, mode.name, end_reason.value,
                    stats.total_score, stats.correct, stats.incorrect,
                    stats.accuracy, stats.best_streak, stats.average_response_time
                )
            )

            await db.execute(
                """
                UPDATE players
                SET games_played = games_played + 1,
                    total_score = total_score + ?,
                    best_score = MAX(best_score, ?),
                    best_streak = MAX(best_streak, ?),
                    last_played = ?
                WHERE user_id = ?
                """,
                (
                    stats.total_score,
                    stats.total_score,
                    stats.best_streak,
                    datetime.now(timezone.utc).isoformat(),
                    user_id
                )
            )

            await db.commit()

        logger.debug("Saved game %s for %s (score=%d)", session_id, user_id, stats.total_score)
        return session_id

    # Leaderboard operations
    async def get_leaderboard(
        self,
        variant: Optional[str] = None,
        limit: int = config.LEADERBOARD_LIMIT
    ) -> List[Dict]:
        """Get leaderboard rankings, overall or for one minigame."""
        async with self._get_connection() as db:
            if variant:
                query = """
                    SELECT
                        p.user_id,
                        p.username,
                        SUM(g.total_score) as total_score,
                        COUNT(*) as games,
                        ROUND(AVG(g.accuracy) * 100, 1) as avg_accuracy,
                        MAX(g.total_score) as best_score
                    FROM players p
                    INNER JOIN game_sessions g ON p.user_id = g.user_id
                    WHERE g.variant = ?
                    GROUP BY p.user_id, p.username
                    ORDER BY total_score DESC
                    LIMIT ?
                """
                params = [variant, limit]
            else:
                query = """
                    SELECT
                        p.user_id,
                        p.username,
                        p.total_score,
                        p.games_played,
                        (SELECT ROUND(AVG(g.accuracy) * 100, 1)
                         FROM game_sessions g WHERE g.user_id = p.user_id) as avg_accuracy,
                        p.best_score
                    FROM players p
                    WHERE p.games_played > 0
                    ORDER BY p.total_score DESC
                    LIMIT ?
                """
                params = [limit]

            async with db.execute(query, params) as cursor:
                results = []
                async for row in cursor:
                    results.append({
                        'user_id': row[0],
                        'username': row[1],
                        'total_score': row[2],
                        'games': row[3],
                        'avg_accuracy': row[4] or 0.0,
                        'best_score': row[5]
                    })

                return results

    async def get_player_rank(self, user_id: str, variant: Optional[str] = None) -> Optional[int]:
        """Get a player's rank on the leaderboard."""
        leaderboard = await self.get_leaderboard(variant, limit=1000)
        for i, entry in enumerate(leaderboard, 1):
            if entry['user_id'] == user_id:
                return i
        return None

    @staticmethod
    def _player_row(row) -> Dict:
        return {
            'user_id': row[0],
            'username': row[1],
            'games_played': row[2],
            'total_score': row[3],
            'best_score': row[4],
            'best_streak': row[5],
            'created_at': row[6],
            'last_played': row[7],
        }


# Global database manager instance
db_manager = DatabaseManager()
