"""Health check and monitoring API endpoints."""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
import structlog
from sqlalchemy import text

from ..config import get_settings
from ..models.response import HealthResponse
from ..service_instance import get_service
from ..services import GlossaryService

router = APIRouter(prefix="/api/v1", tags=["health"])
settings = get_settings()
logger = structlog.get_logger()

# Track application start time
app_start_time = time.time()


def _check_database(service: GlossaryService) -> str:
    try:
        with service.repository.database.session() as session:
            session.execute(text("SELECT 1"))
        return "healthy"
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        return "unhealthy"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health status of the glossary service",
)
def health_check(service: GlossaryService = Depends(get_service)) -> HealthResponse:
    """
    Perform a health check on the glossary service.

    The term extractor is reported as ``disabled`` when no Anthropic API key
    is configured; that does not degrade the overall status.
    """
    try:
        dependencies = {
            "database": _check_database(service),
            "term_extractor": "healthy" if service.extractor.is_configured else "disabled",
        }

        if dependencies["database"] == "healthy":
            status = "healthy"
        else:
            status = "unhealthy"

        return HealthResponse(
            status=status,
            version=settings.app_version,
            uptime=time.time() - app_start_time,
            dependencies=dependencies,
        )

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Health check failed: {str(e)}")


@router.get(
    "/health/ready",
    summary="Readiness check",
    description="Check if the service is ready to accept requests",
)
def readiness_check(service: GlossaryService = Depends(get_service)) -> JSONResponse:
    """Ready once the database answers queries."""
    database_status = _check_database(service)
    if database_status != "healthy":
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "database": database_status,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    return JSONResponse(
        status_code=200,
        content={
            "status": "ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service_stats": service.get_stats(),
        },
    )


@router.get(
    "/health/live",
    summary="Liveness check",
    description="Check if the service is alive and responding",
)
async def liveness_check() -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content={
            "status": "alive",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": time.time() - app_start_time,
        },
    )
