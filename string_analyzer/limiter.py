from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from string_analyzer.config import Settings, settings


def default_limit(config: Settings = settings) -> str:
    return f"{config.RATE_LIMIT} per {config.RATE_LIMIT_WINDOW} seconds"


def create_limiter(config: Settings = settings) -> Limiter:
    # The default limit is resolved per request so it follows the live settings
    return Limiter(
        key_func=get_remote_address,
        default_limits=[lambda: default_limit(config)],
        enabled=config.RATE_LIMIT_ENABLED,
    )


limiter = create_limiter()


def get_middleware() -> type:
    return SlowAPIMiddleware
