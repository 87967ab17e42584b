"""
Health and metrics endpoints.
"""

import logging

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.clock import Clock, get_clock
from core.database import get_db
from core.exceptions import APIError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)):
    """
    Liveness plus a ``SELECT 1`` against the database.

    Publicly accessible; returns 503 when the database is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database query failed: {e}")
        raise APIError(
            status_code=503,
            detail="Database unavailable",
            error_code="DATABASE_UNAVAILABLE",
        )
    return {
        "message": "Healthy",
        "data": {"status": "ok", "database": "ok", "timestamp": clock.now().isoformat()},
    }


@router.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
