"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lifetrack.api.routes import router
from lifetrack.api.middleware import setup_cors, setup_rate_limiting
from lifetrack.config import LOG_LEVEL
from lifetrack.exceptions import (
    AuthenticationError,
    ConfigurationError,
    LifeTrackError,
    RecordNotFoundError,
    StorageError,
    ValidationError,
)
from lifetrack.services import ServiceContainer, build_container

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ValidationError: 422,
    RecordNotFoundError: 404,
    AuthenticationError: 401,
    StorageError: 503,
    ConfigurationError: 500,
}


def status_code_for(exc: LifeTrackError) -> int:
    for error_type, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application"""
    # Startup
    logger.info("Starting API server...")
    if getattr(app.state, "container", None) is None:
        app.state.container = build_container()

    yield

    # Shutdown
    logger.info("Shutting down API server...")
    await app.state.container.close()


def create_api_application(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure FastAPI application

    Args:
        container: Pre-built service container; built from configuration at
            startup if omitted
    """
    app = FastAPI(
        title="LifeTrack API",
        description="Goal tracking with points, streaks and levels",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.container = container

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)

    # Include routes
    app.include_router(router)

    @app.exception_handler(LifeTrackError)
    async def lifetrack_exception_handler(request: Request, exc: LifeTrackError):
        return JSONResponse(status_code=status_code_for(exc), content=exc.to_dict())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created")

    return app
