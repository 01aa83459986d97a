"""Health check endpoints."""

import logging
import time
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..dependencies import get_db
from ..schemas import HealthCheckResponse
from ...database.options import get_webhook_url

logger = logging.getLogger(__name__)

router = APIRouter()

# Track application start time
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Overall health check",
    description="Check database connectivity and whether a webhook URL is configured",
)
async def health_check(db: Session = Depends(get_db)) -> HealthCheckResponse:
    """
    Get overall application health status.

    Returns:
        Health check response with database status and uptime
    """
    db_connected = False
    webhook_configured = False
    try:
        db.execute(text("SELECT 1"))
        db_connected = True
        webhook_configured = bool(get_webhook_url(db))
    except SQLAlchemyError as e:
        logger.error(f"Health check database error: {e}")

    return HealthCheckResponse(
        status="healthy" if db_connected else "unhealthy",
        database_connected=db_connected,
        webhook_configured=webhook_configured,
        uptime_seconds=time.time() - _start_time,
    )
