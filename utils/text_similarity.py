"""Text normalization and typed-answer matching."""

import re
import unicodedata
from typing import Optional, Sequence

# Zero-width and bidi marks that sneak in from copy-paste
_INVISIBLE = re.compile('[\u200b\u200e\u200f\u202a-\u202e]')


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize('NFKD', text)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text: str) -> str:
    """
    Normalize text for comparison.

    - Convert to lowercase
    - Strip diacritics and invisible marks
    - Remove punctuation (except spaces)
    - Collapse multiple spaces
    """
    if not text:
        return ""

    text = strip_diacritics(text.lower())
    text = _INVISIBLE.sub('', text)
    text = re.sub(r'[^\w\s]', '', text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def resolve_option(answer: str, options: Sequence[str]) -> Optional[int]:
    """
    Map a typed answer to an option index.

    Accepts a 1-based option number, the exact option text, or text equal
    after normalization. When several options match, the first one in
    presentation order wins.
    """
    if answer is None:
        return None
    answer = answer.strip()

    if answer.isdigit():
        index = int(answer) - 1
        return index if 0 <= index < len(options) else None

    for index, option in enumerate(options):
        if option == answer:
            return index

    normalized = normalize_text(answer)
    if not normalized:
        return None
    for index, option in enumerate(options):
        if normalize_text(option) == normalized:
            return index
    return None


def matches_answer(answer: str, target: str) -> bool:
    """Loose comparison used for typed match pairs."""
    return bool(answer) and normalize_text(answer) == normalize_text(target)
