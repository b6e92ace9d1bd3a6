"""
Travel Journal Backend — Health Check Route
=============================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the database and reports the result.

Status levels:
    - OK:        database reachable (HTTP 200)
    - DEGRADED:  database unreachable (HTTP 503, stop routing traffic)
The country directory is not probed: it is optional for the journal itself
and every probe would spend upstream quota.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from travel_journal import __version__
from travel_journal import database
from travel_journal.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "OK"
    message = "Travel Journal API is running"

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        overall = "DEGRADED"
        message = "Travel Journal API is running without a database"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        message=message,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        database=db_status,
    )
