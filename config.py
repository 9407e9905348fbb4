"""Configuration constants for the Flashcard Game Bot."""

import os
from dotenv import load_dotenv

load_dotenv()

# Scoring per minigame (points)
VARIANT_SCORING = {
    'quiz': {
        'base_score': 10,
        'quick_response_threshold': 2.0,  # seconds
        'quick_response_bonus': 5,
        'special_card_bonus': 5,
    },
    'match': {
        'base_score': 10,
        'quick_response_threshold': 1.5,
        'quick_response_bonus': 3,
        'special_card_bonus': 5,
    },
    'swipe': {
        'base_score': 8,
        'quick_response_threshold': 1.0,
        'quick_response_bonus': 4,
        'special_card_bonus': 5,
    },
}

# Survival mode
DEFAULT_SURVIVAL_LIVES = int(os.getenv("SURVIVAL_LIVES", "3"))
MAX_SURVIVAL_LIVES = 10

# Time mode
DEFAULT_TIME_DURATION = float(os.getenv("TIME_DURATION", "60"))  # seconds
TIMER_TICK_INTERVAL = 0.1  # seconds

# Round generation
QUIZ_OPTION_COUNT = 4
ANTI_REPEAT_WINDOW = int(os.getenv("ANTI_REPEAT_WINDOW", "1"))
MIN_WORDS = {
    'quiz': 2,
    'match': 1,
    'swipe': 1,
}

# Special cards
SPECIAL_CARD_CHANCE = float(os.getenv("SPECIAL_CARD_CHANCE", "0.15"))
SPECIAL_CARD_WEIGHT_THRESHOLD = 600

# Word weight (0 = always missed, 1000 = always right)
WORD_WEIGHT_DEFAULT = 500
WORD_WEIGHT_MAX = 1000

# Storage and bot
DATABASE_PATH = os.getenv("DATABASE_PATH", "./data/flashcards.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LEADERBOARD_LIMIT = 15
