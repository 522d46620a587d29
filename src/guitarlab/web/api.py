"""FastAPI application factory.

Main entry point for the guitarlab Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from guitarlab import __version__
from guitarlab.config.app_config import load_app_config
from guitarlab.db.database import init_db
from guitarlab.web.routes import (
    health_router,
    progress_router,
    achievements_router,
    content_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    config = load_app_config()
    init_db(config.db_path)
    logger.info(
        "api_startup",
        db_path=str(config.db_path.absolute()),
        categories=list(config.categories),
    )
    yield
    # Shutdown (nothing to do for now)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report missing or malformed parameters as 400."""
    errors = exc.errors()
    missing = [".".join(str(p) for p in e["loc"][1:]) for e in errors]
    logger.info("request_invalid", path=request.url.path, fields=missing)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"Missing or invalid parameters: {', '.join(missing)}"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their details from clients."""
    logger.error(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="guitarlab API",
        description="Lessons, checklist progress, streaks and badges for guitar practice",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include routers
    app.include_router(health_router)
    app.include_router(progress_router)
    app.include_router(achievements_router)
    app.include_router(content_router)

    return app


# Default app instance for uvicorn
app = create_app()
