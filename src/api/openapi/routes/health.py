"""Health check endpoints."""

from enum import Enum

from fastapi import APIRouter, Response, status
from pydantic import BaseModel, Field

from src.api.dependencies import DocumentStoreDep, SettingsDep

router = APIRouter()


class HealthState(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""

    name: str = Field(description="Component name")
    status: HealthState = Field(description="Component health status")
    latency_ms: float | None = Field(default=None, description="Check latency")
    message: str | None = Field(default=None, description="Additional details")


class HealthResponse(BaseModel):
    """Health check response."""

    status: HealthState = Field(description="Overall health status")
    version: str = Field(description="Application version")
    environment: str = Field(description="Deployment environment")
    components: list[ComponentHealth] = Field(
        default_factory=list,
        description="Individual component health",
    )


class LivenessResponse(BaseModel):
    """Simple liveness response."""

    status: str = Field(default="ok")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Ping the document database and report overall service health.",
)
async def health_check(
    settings: SettingsDep,
    store: DocumentStoreDep,
    response: Response,
) -> HealthResponse:
    """Check health of the document database."""
    db_health = await store.health_check()
    state = HealthState.HEALTHY if db_health.healthy else HealthState.UNHEALTHY

    if not db_health.healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=state,
        version=settings.app.version,
        environment=settings.app.environment,
        components=[
            ComponentHealth(
                name="document_db",
                status=state,
                latency_ms=round(db_health.latency_ms, 2),
                message=db_health.message,
            )
        ],
    )


@router.get(
    "/health/live",
    response_model=LivenessResponse,
    summary="Liveness probe",
    description="Simple liveness check for Kubernetes probes.",
)
async def liveness() -> LivenessResponse:
    """Simple liveness check - just verifies the app is running."""
    return LivenessResponse(status="ok")
