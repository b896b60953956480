"""Health check endpoints.

Liveness checks never touch the database; readiness checks that the
database answers.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from feed_engine import __version__
from feed_engine.config import settings
from feed_engine.infra.database import verify_db_connection
from feed_engine.infra.logging import get_logger
from feed_engine.schemas.common import HealthResponse

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Basic health check.

    Returns 200 if service is running.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment,
        checks={},
    )


@router.get("/health/ready", response_model=HealthResponse)
async def health_ready() -> JSONResponse:
    """Readiness check.

    Verifies the database is reachable; answers 503 when it is not.
    """
    checks = {"database": await verify_db_connection()}
    all_healthy = all(checks.values())

    if not all_healthy:
        logger.warning("Readiness check failed", checks=checks)

    body = HealthResponse(
        status="healthy" if all_healthy else "degraded",
        version=__version__,
        environment=settings.environment,
        checks=checks,
    )
    return JSONResponse(status_code=200 if all_healthy else 503, content=body.model_dump())


@router.get("/health/live", response_model=HealthResponse)
async def health_live() -> HealthResponse:
    """Liveness check.

    Basic check that service is responding.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment,
        checks={"alive": True},
    )
