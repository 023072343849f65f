"""API middleware for rate limiting and CORS"""
import logging
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi.middleware.cors import CORSMiddleware

from lifetrack.config import CORS_ORIGINS, RATE_LIMIT_DEFAULT, RATE_LIMIT_STRICT

logger = logging.getLogger(__name__)

# Keyed by client address, never by the caller-supplied principal
limiter = Limiter(key_func=get_remote_address, default_limits=[RATE_LIMIT_DEFAULT])


def parse_origins(value: str) -> list[str]:
    """Comma-separated origins -> list (blanks dropped)"""
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def setup_cors(app, origins: str = CORS_ORIGINS):
    """Configure CORS for the browser front end"""
    cors_origins = parse_origins(origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["*"],
    )

    logger.info(f"CORS configured for origins: {cors_origins}")


def setup_rate_limiting(app):
    """Attach the shared limiter and its 429 handler"""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    logger.info(f"Rate limiting configured (default {RATE_LIMIT_DEFAULT}, strict {RATE_LIMIT_STRICT})")
