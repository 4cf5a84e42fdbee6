"""Property computation for submitted strings.

Every function here is pure: the result depends only on the input string,
so records can be analyzed once at creation and never recomputed.
"""
from hashlib import sha256
from typing import Dict

from string_analyzer.schemas import StringProperties


def compute_sha256(value: str) -> str:
    """Lowercase hex SHA-256 digest of the UTF-8 encoded value."""
    return sha256(value.encode("utf-8")).hexdigest()


def is_palindrome(value: str) -> bool:
    """Case-insensitive palindrome check. Whitespace and punctuation count."""
    lower = value.lower()
    return lower == lower[::-1]


def count_unique_characters(value: str) -> int:
    return len(set(value))


def count_words(value: str) -> int:
    # str.split() with no separator drops empty tokens, so "   " -> 0
    return len(value.split())


def character_frequency(value: str) -> Dict[str, int]:
    """Occurrences per character, case-sensitive, in first-seen order."""
    freq: Dict[str, int] = {}
    for c in value:
        freq[c] = freq.get(c, 0) + 1
    return freq


def analyze(value: str) -> StringProperties:
    return StringProperties(
        length=len(value),
        is_palindrome=is_palindrome(value),
        unique_characters=count_unique_characters(value),
        word_count=count_words(value),
        sha256_hash=compute_sha256(value),
        character_frequency_map=character_frequency(value),
    )
