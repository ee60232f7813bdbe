"""
Health check and metrics endpoints
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vocalis.core.config import get_settings
from vocalis.core.database import get_db
from vocalis.core.logging_config import LoggingConfig
from vocalis.core.metrics import render_latest

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint

    Returns:
        dict: Service status and database/reasoning endpoint component status
    """
    settings = get_settings()
    components = {}

    try:
        db.execute(text("SELECT 1"))
        components["database"] = "healthy"
    except SQLAlchemyError as e:
        logger.warning(f"Database health check failed: {e}")
        components["database"] = "unhealthy"

    components["reasoning"] = "configured" if settings.gemini_api_url else "not_configured"

    return {
        "status": "healthy" if components["database"] == "healthy" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.app_name,
        "components": components,
    }


@router.get("/metrics")
async def metrics():
    """Prometheus metrics"""
    body, content_type = render_latest()
    return Response(content=body, media_type=content_type)
