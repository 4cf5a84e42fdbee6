from fastapi import APIRouter, Depends, Query, Request, Response

from string_analyzer import services
from string_analyzer.config import settings
from string_analyzer.filters import build_filters
from string_analyzer.limiter import limiter
from string_analyzer.schemas import (
    ErrorResponse,
    NaturalLanguageResponse,
    StringListResponse,
    StringRecord,
    StringRequest,
)
from string_analyzer.storage import StringStore

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse}}


def get_store(request: Request) -> StringStore:
    """The store built at startup; overridden in tests."""
    return request.app.state.store


@router.get("/health")
@limiter.exempt
def health() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok"}


@router.post(
    "/strings",
    response_model=StringRecord,
    status_code=201,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
def create_string_endpoint(payload: StringRequest, store: StringStore = Depends(get_store)) -> StringRecord:
    """Create and analyze a string."""
    return services.create_string(payload.value, store, settings.MAX_STRING_LENGTH)


@router.get("/strings/filter-by-natural-language", response_model=NaturalLanguageResponse)
def filter_by_natural_language(
    query: str = Query(..., min_length=1, description="e.g. 'all single word palindromic strings'"),
    store: StringStore = Depends(get_store),
) -> dict:
    """Filter strings using a natural language query."""
    return services.filter_by_natural_language(store, query)


@router.get("/strings/{string_value}", response_model=StringRecord, responses=NOT_FOUND)
def get_string_endpoint(string_value: str, store: StringStore = Depends(get_store)) -> StringRecord:
    """Get a specific string by its raw value or its SHA-256 id."""
    return services.get_string(string_value, store)


@router.get("/strings", response_model=StringListResponse)
def get_all_strings(
    is_palindrome: bool = Query(None),
    min_length: int = Query(None),
    max_length: int = Query(None),
    word_count: int = Query(None),
    contains_character: str = Query(None),
    store: StringStore = Depends(get_store),
) -> dict:
    """Get all strings with optional filtering."""
    filters = build_filters(is_palindrome, min_length, max_length, word_count, contains_character)
    return services.list_strings(store, filters)


@router.delete("/strings/{string_value}", status_code=204, responses=NOT_FOUND)
def delete_string_endpoint(string_value: str, store: StringStore = Depends(get_store)) -> Response:
    """Delete a string by its raw value or its SHA-256 id."""
    services.delete_string(string_value, store)
    return Response(status_code=204)
