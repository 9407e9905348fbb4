"""Database models and schemas."""

# SQL schemas for all tables

CREATE_PLAYERS_TABLE = """
CREATE TABLE IF NOT EXISTS players (
    user_id TEXT PRIMARY KEY,
    username TEXT NOT NULL,
    games_played INTEGER DEFAULT 0,
    total_score INTEGER DEFAULT 0,
    best_score INTEGER DEFAULT 0,
    best_streak INTEGER DEFAULT 0,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    last_played TIMESTAMP
);
"""

CREATE_GAME_SESSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS game_sessions (
    session_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    server_id TEXT,
    channel_id TEXT,
    variant TEXT NOT NULL,
    mode TEXT NOT NULL,
    end_reason TEXT NOT NULL,
    total_score INTEGER DEFAULT 0,
    correct INTEGER DEFAULT 0,
    incorrect INTEGER DEFAULT 0,
    accuracy REAL DEFAULT 0.0,
    best_streak INTEGER DEFAULT 0,
    average_response_time REAL DEFAULT 0.0,
    ended_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (user_id) REFERENCES players(user_id)
);
"""

# Indexes for performance
CREATE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_game_sessions_user ON game_sessions(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_game_sessions_variant ON game_sessions(variant);",
    "CREATE INDEX IF NOT EXISTS idx_game_sessions_score ON game_sessions(total_score DESC);",
]
