"""Rule-based translation of natural language queries into list filters.

This is a fixed set of patterns over the lowercased query, not language
understanding. Rules run in order and every match contributes; a query
that fires no rule at all is rejected.
"""
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Pattern

from string_analyzer.exceptions import (
    FilterConflictError,
    InvalidInputError,
    UnparseableQueryError,
)
from string_analyzer.schemas import InterpretedQuery

_NUM_WORDS = {
    'zero': 0,
    'single': 1,
    'one': 1,
    'two': 2,
    'three': 3,
    'four': 4,
    'five': 5,
    'six': 6,
    'seven': 7,
    'eight': 8,
    'nine': 9,
    'ten': 10,
    'eleven': 11,
    'twelve': 12,
    'thirteen': 13,
    'fourteen': 14,
    'fifteen': 15,
    'sixteen': 16,
    'seventeen': 17,
    'eighteen': 18,
    'nineteen': 19,
    'twenty': 20,
}

# Longest alternatives first so "seventeen" is not read as "seven"
_NUMBER = r'(\d+|' + '|'.join(sorted(_NUM_WORDS, key=len, reverse=True)) + r')'

_LOWER_EXCLUSIVE = ('longer than', 'greater than', 'more than')
_LOWER_INCLUSIVE = ('at least', 'min length', 'minimum length')
_UPPER_EXCLUSIVE = ('shorter than', 'less than', 'fewer than')
_UPPER_INCLUSIVE = ('at most', 'max length', 'maximum length')

Filters = Dict[str, Any]


def _word_to_int(s: str) -> Optional[int]:
    """Convert numeric words or digit strings to integers."""
    s = s.strip().lower()
    if s.isdigit():
        try:
            return int(s)
        except ValueError:
            # past the interpreter's int string conversion limit
            return None
    return _NUM_WORDS.get(s)


@dataclass(frozen=True)
class Rule:
    """One translation rule: every match of ``pattern`` is passed to ``apply``."""
    name: str
    pattern: Pattern[str]
    apply: Callable[[re.Match, Filters], None]

    def run(self, query: str, filters: Filters) -> None:
        for match in self.pattern.finditer(query):
            self.apply(match, filters)


def _set_word_count(m: re.Match, filters: Filters) -> None:
    n = _word_to_int(m.group(1))
    if n is not None:
        filters['word_count'] = n


def _set_palindrome(m: re.Match, filters: Filters) -> None:
    filters['is_palindrome'] = True


def _set_length_bound(m: re.Match, filters: Filters) -> None:
    phrase = re.sub(r'\s+', ' ', m.group(1))
    n = _word_to_int(m.group(2))
    if n is None:
        return

    if phrase.startswith(_LOWER_EXCLUSIVE) or phrase.startswith(_LOWER_INCLUSIVE):
        bound = n + 1 if phrase.startswith(_LOWER_EXCLUSIVE) else n
        filters['min_length'] = max(filters.get('min_length', 0), bound)
        return

    bound = n - 1 if phrase.startswith(_UPPER_EXCLUSIVE) else n
    if bound < 0:
        raise FilterConflictError(
            f"no string is {phrase} {n} characters",
            details={"phrase": m.group(0)},
        )
    current = filters.get('max_length')
    filters['max_length'] = bound if current is None else min(current, bound)


def _set_character(m: re.Match, filters: Filters) -> None:
    # The first captured character wins; later, vaguer phrasings never override it
    filters.setdefault('contains_character', m.group(1))


def _set_first_vowel(m: re.Match, filters: Filters) -> None:
    filters.setdefault('contains_character', 'a')


_LENGTH_PHRASES = '|'.join(
    p.replace(' ', r'\s+')
    for p in _LOWER_EXCLUSIVE + _LOWER_INCLUSIVE + _UPPER_EXCLUSIVE + _UPPER_INCLUSIVE
)

RULES = (
    Rule(
        'word_count',
        re.compile(r'\b' + _NUMBER + r'\s+words?\b'),
        _set_word_count,
    ),
    Rule(
        'palindrome',
        re.compile(r'palindrom'),
        _set_palindrome,
    ),
    Rule(
        'length_bound',
        # "at least 3 words" is a word count, not a length
        re.compile(
            r'\b(' + _LENGTH_PHRASES + r')\s*(?:of\s+)?' + _NUMBER + r'\b(?!\s+words?\b)'
        ),
        _set_length_bound,
    ),
    Rule(
        'contains_letter',
        re.compile(
            r"\b(?:contains?|containing)\s+(?:the\s+)?(?:letter|character)\s+"
            r"['\"]?([a-z])['\"]?(?![a-z])"
        ),
        _set_character,
    ),
    Rule(
        'contains_generic',
        re.compile(
            r"\b(?:contains?|containing|with\s+(?:the\s+)?character|has)\s+"
            r"['\"]?([a-z])['\"]?(?![a-z])"
        ),
        _set_character,
    ),
    Rule(
        'first_vowel',
        re.compile(r'\bfirst\s+vowel\b'),
        _set_first_vowel,
    ),
)


def interpret_nl_query(query: str) -> InterpretedQuery:
    """Interpret natural language filter queries into structured filters.

    Raises UnparseableQueryError when no rule fires. Conflicting bounds are
    left in place; callers validate the result before matching.
    """
    if not isinstance(query, str):
        raise InvalidInputError("query must be a string")

    q = query.lower()
    filters: Filters = {}
    for rule in RULES:
        rule.run(q, filters)

    if not filters:
        raise UnparseableQueryError(
            "Unable to parse natural language query into structured filters.",
            details={"interpreted_query": {"original": query, "parsed_filters": {}}},
        )

    return InterpretedQuery(original=query, parsed_filters=filters)
