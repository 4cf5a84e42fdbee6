from typing import Any, Dict, Optional


class StringAnalyzerError(Exception):
    """Base class for every failure the analyzer core reports to its caller."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidInputError(StringAnalyzerError):
    """Missing or wrong-typed value, or a malformed filter parameter."""


class PayloadTooLargeError(StringAnalyzerError):
    """Submitted string exceeds the configured maximum length."""


class DuplicateKeyError(StringAnalyzerError):
    """A record with the same content hash is already stored."""


class NotFoundError(StringAnalyzerError):
    """No record matches the given value or id."""


class FilterConflictError(StringAnalyzerError):
    """Filters are well-formed but contradict each other (min_length > max_length)."""


class UnparseableQueryError(StringAnalyzerError):
    """A natural language query matched none of the translation rules."""
