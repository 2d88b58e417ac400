"""
Tourenplan Backend — Health Check Route
=========================================

What:  Liveness probe for monitoring and load balancers (no auth).
How:   Runs SELECT 1 against the database.

Status levels:
    - healthy:   Database reachable
    - unhealthy: Database unreachable (still HTTP 200 so the process
                 counts as alive; the body tells monitors the rest)
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from tourenplan import __version__
from tourenplan import database
from tourenplan.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
