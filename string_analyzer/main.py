import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Type, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from string_analyzer import limiter as limiter_module
from string_analyzer.config import settings
from string_analyzer.exceptions import (
    DuplicateKeyError,
    FilterConflictError,
    InvalidInputError,
    NotFoundError,
    PayloadTooLargeError,
    StringAnalyzerError,
    UnparseableQueryError,
)
from string_analyzer.logging import RequestLoggingMiddleware, init_logging, setup_query_logging
from string_analyzer.middleware import SecurityHeadersMiddleware
from string_analyzer.routes import router
from string_analyzer.storage import SqlStringStore, build_store

init_logging()
logger = logging.getLogger("string_analyzer")

ERROR_STATUS: Dict[Type[StringAnalyzerError], int] = {
    InvalidInputError: 400,
    UnparseableQueryError: 400,
    NotFoundError: 404,
    DuplicateKeyError: 409,
    PayloadTooLargeError: 413,
    FilterConflictError: 422,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = build_store(settings)
    if isinstance(store, SqlStringStore):
        setup_query_logging(store.engine)
    app.state.store = store
    logger.info(
        "Storage backend '%s' ready with %d records",
        settings.STORAGE_BACKEND,
        store.count(),
    )
    try:
        yield
    finally:
        store.close()
        logger.info("Storage backend closed")


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description=(
        "Analyze strings and store their computed properties.\n\n"
        "Features:\n"
        "- Length, palindrome, unique characters, word count, SHA-256 and character frequency\n"
        "- Filter stored strings by property\n"
        "- Filter with simple natural language queries"
    ),
    lifespan=lifespan,
)
app.state.limiter = limiter_module.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(cast(Any, limiter_module.get_middleware()))
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, tags=["Strings"])


@app.get("/")
def root():
    return {"message": f"{settings.APP_NAME} running. Visit /docs for API documentation."}


# -------------------------------
# Unified error response handlers
# -------------------------------
@app.exception_handler(StringAnalyzerError)
async def string_analyzer_error_handler(request: Request, exc: StringAnalyzerError):
    status = ERROR_STATUS.get(type(exc), 400)
    logger.warning(
        "%s: %s %s -> %s | %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        status,
        exc.message,
    )
    body: Dict[str, Any] = {"error": exc.message}
    if exc.details is not None:
        body["details"] = exc.details
    return JSONResponse(status_code=status, content=body)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.error(
        "HTTPException: %s %s -> %s | detail=%s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.detail,
    )
    body = {"error": exc.detail if isinstance(exc.detail, str) else "Error"}
    if isinstance(exc.detail, dict):
        body = {
            "error": exc.detail.get("error") or "Error",
            "details": exc.detail.get("details"),
        }
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


def _is_wrong_value_type(errors) -> bool:
    """True when the body parsed but ``value`` is not a string."""
    return bool(errors) and all(
        tuple(err.get("loc", ())) == ("body", "value") and err.get("type") != "missing"
        for err in errors
    )


def jsonable_errors(errors) -> list:
    # pydantic error contexts may hold exception instances
    return [{k: v for k, v in err.items() if k in ("type", "loc", "msg")} for err in errors]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    is_post_strings = request.method == "POST" and request.url.path.rstrip("/").endswith("/strings")

    # Missing field or invalid JSON -> 400, wrong type for "value" -> 422
    status = 422 if is_post_strings and _is_wrong_value_type(errors) else 400
    logger.warning(
        "ValidationError: %s %s -> %s | errors=%s",
        request.method,
        request.url.path,
        status,
        errors,
    )
    message = '"value" must be a string' if status == 422 else "Validation failed"
    return JSONResponse(
        status_code=status,
        content={"error": message, "details": jsonable_errors(errors)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception: %s %s",
        request.method,
        request.url.path,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
