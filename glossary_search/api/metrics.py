"""Metrics and monitoring API endpoints."""

import psutil
from fastapi import APIRouter, Depends, HTTPException

from ..models.response import MetricsResponse
from ..service_instance import get_service
from ..services import GlossaryService

router = APIRouter(prefix="/api/v1", tags=["metrics"])


@router.get(
    "/metrics",
    response_model=MetricsResponse,
    summary="Get performance metrics",
    description="Query counts, response times and process memory usage",
)
async def get_metrics(service: GlossaryService = Depends(get_service)) -> MetricsResponse:
    try:
        stats = service.get_stats()
        memory_usage_mb = psutil.Process().memory_info().rss / (1024 * 1024)

        return MetricsResponse(
            total_queries=stats["total_queries"],
            term_lookups=stats["term_lookups"],
            searches=stats["searches"],
            text_scans=stats["text_scans"],
            average_response_time_ms=stats["average_execution_time_ms"],
            no_match_rate=stats["no_match_rate"],
            memory_usage_mb=memory_usage_mb,
        )

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get metrics: {str(e)}")
