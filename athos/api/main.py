"""FastAPI application setup and configuration."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from athos import __version__
from athos.api.middleware.error_handler import setup_exception_handlers
from athos.api.middleware.logging import RequestLoggingMiddleware, setup_logging
from athos.shared.config import get_settings
from athos.shared.database import shutdown, startup
from athos.shared.service_registry import ServiceContainer, build_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Verifies the backing services the container relies on at startup, and
    drains buffered analytics before closing connections at shutdown.
    """
    container: ServiceContainer = app.state.container
    await startup(use_database=container.uses_database, use_redis=container.uses_redis)
    yield
    delivered = await container.analytics.flush_all()
    logger.info(f"Flushed {delivered} analytics events on shutdown")
    await shutdown()


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        container: Prebuilt services; built from settings and feature flags
            when omitted

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()
    setup_logging()

    application = FastAPI(
        title="Mount Athos Explorer API",
        description="""
        Adaptive learning service for the Mount Athos curriculum:
        - Progress tracking with section, module and overall completion
        - Quiz grading and attempt history
        - Learning paths with recommendations and adaptive suggestions
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    application.state.container = container or build_services(settings)

    cors_origins = settings.cors_origins_list
    if settings.is_production and not cors_origins:
        logger.warning(
            "No CORS_ORIGINS configured in production. "
            "API will not be accessible from browsers."
        )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "Accept",
            "Origin",
            "X-Requested-With",
            "X-Request-ID",
        ],
        max_age=600,
    )

    setup_exception_handlers(application)
    application.add_middleware(RequestLoggingMiddleware)

    from athos.api.routers import (
        content_router,
        health_router,
        learning_path_router,
        progress_router,
        quizzes_router,
    )
    from athos.api.schemas import ErrorResponse

    error_responses = {
        401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
        404: {"model": ErrorResponse, "description": "Resource not found"},
    }

    application.include_router(
        health_router,
        prefix="/health",
        tags=["Health"],
    )
    application.include_router(
        progress_router,
        prefix="/progress",
        tags=["Progress"],
        responses=error_responses,
    )
    application.include_router(
        quizzes_router,
        prefix="/quizzes",
        tags=["Quizzes"],
        responses=error_responses,
    )
    application.include_router(
        learning_path_router,
        prefix="/learning-path",
        tags=["Learning Path"],
        responses=error_responses,
    )
    application.include_router(
        content_router,
        prefix="/content",
        tags=["Content"],
        responses=error_responses,
    )

    return application


# Create app instance
app = create_app()
