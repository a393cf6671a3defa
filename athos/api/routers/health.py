"""Health check API routes."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from athos import __version__
from athos.api.dependencies import Services
from athos.shared.database import check_db_health, check_redis_health

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(
        ...,
        description="Overall health status",
    )
    version: str = Field(
        default=__version__,
        description="API version",
    )


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: str = Field(
        ...,
        description="Overall readiness status",
    )
    database: str = Field(
        ...,
        description="Database connection status, or disabled",
    )
    redis: str = Field(
        ...,
        description="Redis connection status, or disabled",
    )


class LivenessResponse(BaseModel):
    """Liveness check response."""

    status: str = Field(
        default="alive",
        description="Liveness status",
    )


@router.get(
    "",
    response_model=HealthResponse,
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Check the backing services the current configuration uses.",
)
async def readiness_check(services: Services) -> ReadinessResponse:
    """Readiness check with dependency verification.

    Services switched off by feature flags report "disabled" and do not
    affect readiness.
    """
    db_status = "disabled"
    redis_status = "disabled"

    if services.uses_database:
        db_status = "healthy" if await check_db_health(max_retries=1) else "unhealthy"
    if services.uses_redis:
        redis_status = "healthy" if await check_redis_health(max_retries=1) else "unhealthy"

    ready = "unhealthy" not in (db_status, redis_status)
    return ReadinessResponse(
        status="ready" if ready else "not_ready",
        database=db_status,
        redis=redis_status,
    )


@router.get(
    "/live",
    response_model=LivenessResponse,
    summary="Liveness check",
)
async def liveness_check() -> LivenessResponse:
    return LivenessResponse(status="alive")
