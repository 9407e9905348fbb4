"""Starter flashcard decks: Spanish to English."""

from typing import Dict, List, Optional
import random

from game.models import WordItem

# Starter words, grouped by category
WORDS = [
    # Food (1-8)
    {'id': 1, 'front': 'la manzana', 'back': 'apple', 'category': 'food'},
    {'id': 2, 'front': 'el pan', 'back': 'bread', 'category': 'food'},
    {'id': 3, 'front': 'el queso', 'back': 'cheese', 'category': 'food'},
    {'id': 4, 'front': 'la leche', 'back': 'milk', 'category': 'food'},
    {'id': 5, 'front': 'el pescado', 'back': 'fish', 'category': 'food'},
    {'id': 6, 'front': 'el arroz', 'back': 'rice', 'category': 'food'},
    {'id': 7, 'front': 'la naranja', 'back': 'orange', 'category': 'food'},
    {'id': 8, 'front': 'el huevo', 'back': 'egg', 'category': 'food'},
    # Animals (9-16)
    {'id': 9, 'front': 'el perro', 'back': 'dog', 'category': 'animals'},
    {'id': 10, 'front': 'el gato', 'back': 'cat', 'category': 'animals'},
    {'id': 11, 'front': 'el caballo', 'back': 'horse', 'category': 'animals'},
    {'id': 12, 'front': 'el pájaro', 'back': 'bird', 'category': 'animals'},
    {'id': 13, 'front': 'la vaca', 'back': 'cow', 'category': 'animals'},
    {'id': 14, 'front': 'el ratón', 'back': 'mouse', 'category': 'animals'},
    {'id': 15, 'front': 'la oveja', 'back': 'sheep', 'category': 'animals'},
    {'id': 16, 'front': 'el oso', 'back': 'bear', 'category': 'animals'},
    # Travel (17-24)
    {'id': 17, 'front': 'el tren', 'back': 'train', 'category': 'travel'},
    {'id': 18, 'front': 'el aeropuerto', 'back': 'airport', 'category': 'travel'},
    {'id': 19, 'front': 'la maleta', 'back': 'suitcase', 'category': 'travel'},
    {'id': 20, 'front': 'el billete', 'back': 'ticket', 'category': 'travel'},
    {'id': 21, 'front': 'la playa', 'back': 'beach', 'category': 'travel'},
    {'id': 22, 'front': 'el mapa', 'back': 'map', 'category': 'travel'},
    {'id': 23, 'front': 'la estación', 'back': 'station', 'category': 'travel'},
    {'id': 24, 'front': 'el pasaporte', 'back': 'passport', 'category': 'travel'},
]

FRONT_LOCALE = 'es'
BACK_LOCALE = 'en'


def _to_item(word: Dict) -> WordItem:
    return WordItem(
        front_text=word['front'],
        back_text=word['back'],
        front_locale=FRONT_LOCALE,
        back_locale=BACK_LOCALE,
        word_id=word['id'],
    )


def get_categories() -> List[str]:
    """Get category names in deck order."""
    seen = []
    for word in WORDS:
        if word['category'] not in seen:
            seen.append(word['category'])
    return seen


def get_word_pool(category: Optional[str] = None) -> List[WordItem]:
    """Get all words of a category (or every word). Unknown categories give an empty pool."""
    if category:
        return [_to_item(w) for w in WORDS if w['category'] == category.lower()]
    return [_to_item(w) for w in WORDS]


def get_random_words(count: int, category: Optional[str] = None) -> List[WordItem]:
    """Get up to ``count`` random words."""
    pool = get_word_pool(category)
    return random.sample(pool, min(count, len(pool)))


def get_word_count(category: Optional[str] = None) -> int:
    return len(get_word_pool(category))
