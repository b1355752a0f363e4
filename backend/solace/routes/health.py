"""
Solace Backend — Health Check Route
====================================

What:  Health check endpoint for container orchestrators and load balancers.
How:   Pings the database with SELECT 1 and reports whether an advice
       generator is configured. The OpenRouter endpoint itself is not
       called: a check every few seconds must not cost tokens.

Status levels:
    - healthy:   database reachable, advice generator configured (HTTP 200)
    - degraded:  database reachable, no advice generator (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError

from solace import __version__
from solace.schemas.responses import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Reports database connectivity and advice generator configuration.",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    db_status = "connected"
    generator_status = "configured"
    overall = "healthy"

    database = getattr(request.app.state, "database", None)
    try:
        if database is None:
            raise RuntimeError("database is not initialized")
        await database.ping()
    except (SQLAlchemyError, OSError, RuntimeError) as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if getattr(request.app.state, "advice_generator", None) is None:
        generator_status = "unconfigured"
        if overall == "healthy":
            overall = "degraded"

    if overall == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        advice_generator=generator_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
