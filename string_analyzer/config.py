from typing import List, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"extra": "ignore", "env_file": ".env", "env_file_encoding": "utf-8"}

    APP_NAME: str = "String Analyzer Service"

    # Storage: "sql" persists through SQLAlchemy, "memory" keeps records in-process
    STORAGE_BACKEND: Literal["sql", "memory"] = "sql"
    DATABASE_URL: str = "sqlite:///./dev.db"

    # Strings longer than this are rejected with 413
    MAX_STRING_LENGTH: int = 10_000

    # Logging configuration used by string_analyzer.logging
    LOG_LEVEL: str = "INFO"
    CONSOLE_LOG_LEVEL: str = "INFO"
    SLOW_QUERY_THRESHOLD_MS: int = 200

    # Rate limiting (slowapi, in-process storage)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT: int = 120
    RATE_LIMIT_WINDOW: int = 60

    CORS_ALLOW_ORIGINS: List[str] = ["*"]


settings = Settings()
