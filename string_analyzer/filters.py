from typing import Optional

from pydantic import ValidationError

from string_analyzer.exceptions import FilterConflictError, InvalidInputError
from string_analyzer.schemas import FilterSet, StringProperties, StringRecord


def build_filters(
    is_palindrome: Optional[bool] = None,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    word_count: Optional[int] = None,
    contains_character: Optional[str] = None,
) -> FilterSet:
    """Validate raw list parameters into a FilterSet.

    Only shape is checked here; contradictions are left to validate_filters.
    """
    for name, val in (("min_length", min_length), ("max_length", max_length), ("word_count", word_count)):
        if val is not None and val < 0:
            raise InvalidInputError(f"{name} must be a non-negative integer")

    if contains_character is not None and len(contains_character) != 1:
        raise InvalidInputError("contains_character must be a single character")

    try:
        return FilterSet(
            is_palindrome=is_palindrome,
            min_length=min_length,
            max_length=max_length,
            word_count=word_count,
            contains_character=contains_character,
        )
    except ValidationError as e:
        raise InvalidInputError("invalid filter parameters", details={"errors": e.errors(include_url=False, include_context=False)}) from e


def validate_filters(filters: FilterSet) -> FilterSet:
    """Reject self-contradictory filters before any record is matched."""
    if filters.min_length is not None and filters.max_length is not None:
        if filters.min_length > filters.max_length:
            raise FilterConflictError(
                "min_length cannot be greater than max_length",
                details={"min_length": filters.min_length, "max_length": filters.max_length},
            )
    return filters


def matches(properties: StringProperties, filters: FilterSet, value: str) -> bool:
    if filters.is_palindrome is not None and properties.is_palindrome != filters.is_palindrome:
        return False

    if filters.min_length is not None and properties.length < filters.min_length:
        return False

    if filters.max_length is not None and properties.length > filters.max_length:
        return False

    if filters.word_count is not None and properties.word_count != filters.word_count:
        return False

    if filters.contains_character is not None:
        # Fold the whole value; lower() may expand one character into several
        if filters.contains_character.lower() not in value.lower():
            return False

    return True


def record_matches(record: StringRecord, filters: FilterSet) -> bool:
    return matches(record.properties, filters, record.value)
