"""
NotesVault Backend: Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the configured repository (SELECT 1 for SQL stores) and
       reports the aggregate status.

Status levels:
    - healthy:   storage reachable (HTTP 200)
    - unhealthy: storage unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Request, Response

from notesvault import __version__
from notesvault.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Storage unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """Report service and storage status; never requires authentication."""
    repository = request.app.state.repository

    storage_status = "connected"
    overall = "healthy"
    if not await repository.ping():
        storage_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: storage unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        storage=storage_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
