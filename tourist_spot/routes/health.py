"""
Tourist Spot API — Health and Root Routes
==========================================

What:  GET / (plain-text liveness banner) and GET /health (dependency probe).
How:   /health pings MongoDB through the MongoDatabase stored on app.state.
       An app built without a database (tests, tooling) reports
       `not_configured` instead of failing.

Status levels:
    healthy:   database reachable (HTTP 200)
    unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from tourist_spot import __version__
from tourist_spot.schemas.tourist_spot import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return "Tourists server is running ..."


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    database = getattr(request.app.state, "database", None)

    if database is None:
        db_status = "not_configured"
        overall = "healthy"
    elif await database.ping():
        db_status = "connected"
        overall = "healthy"
    else:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
