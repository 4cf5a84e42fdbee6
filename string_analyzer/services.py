import re
from datetime import datetime, timezone
from typing import Any, Dict

from string_analyzer.analyzer import analyze, compute_sha256
from string_analyzer.exceptions import (
    FilterConflictError,
    InvalidInputError,
    NotFoundError,
    PayloadTooLargeError,
)
from string_analyzer.filters import record_matches, validate_filters
from string_analyzer.nlp import interpret_nl_query
from string_analyzer.schemas import FilterSet, StringRecord
from string_analyzer.storage import StringStore

_HEX_ID = re.compile(r'^[0-9a-f]{64}$')


def create_string(value: Any, store: StringStore, max_length: int) -> StringRecord:
    if not isinstance(value, str):
        raise InvalidInputError('"value" must be a string')
    if len(value) > max_length:
        raise PayloadTooLargeError(
            f"String exceeds the maximum length of {max_length} characters",
            details={"length": len(value), "max_length": max_length},
        )

    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidInputError(
            '"value" must be encodable as UTF-8',
            details={"position": e.start},
        ) from e

    props = analyze(value)
    record = StringRecord(
        id=props.sha256_hash,
        value=value,
        properties=props,
        created_at=datetime.now(timezone.utc),
    )
    return store.add(record)


def resolve_record_id(key: str, store: StringStore) -> str:
    """Map a path key to a stored id.

    The key is read as a raw string value first. Only when no record has
    that value's hash and the key itself looks like a SHA-256 digest is it
    taken as an id.
    """
    by_value = compute_sha256(key)
    if store.get(by_value) is not None:
        return by_value
    if _HEX_ID.match(key) and store.get(key) is not None:
        return key
    raise NotFoundError(f"String '{key}' not found")


def get_string(key: str, store: StringStore) -> StringRecord:
    record = store.get(resolve_record_id(key, store))
    if record is None:
        # deleted between resolution and lookup
        raise NotFoundError(f"String '{key}' not found")
    return record


def delete_string(key: str, store: StringStore) -> None:
    if not store.delete(resolve_record_id(key, store)):
        raise NotFoundError(f"String '{key}' not found")


def list_strings(store: StringStore, filters: FilterSet) -> Dict[str, Any]:
    validate_filters(filters)
    records = store.filter(lambda r: record_matches(r, filters))
    return {
        "data": records,
        "count": len(records),
        "filters_applied": filters.applied(),
    }


def filter_by_natural_language(store: StringStore, query: str) -> Dict[str, Any]:
    interpreted = interpret_nl_query(query)
    filters = FilterSet(**interpreted.parsed_filters)
    try:
        validate_filters(filters)
    except FilterConflictError as e:
        raise FilterConflictError(
            "Query resulted in conflicting minimum and maximum length filters.",
            details={"interpreted_query": interpreted.model_dump()},
        ) from e

    records = store.filter(lambda r: record_matches(r, filters))
    return {
        "data": records,
        "count": len(records),
        "interpreted_query": interpreted,
    }
