"""
Health check endpoints.

/health is the cheap liveness probe; /health/detailed checks the database,
the Redis broker and which AI providers are configured.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict
import redis
from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """Returns 200 OK if the service is running."""
    return {"status": "healthy", "timestamp": _now()}


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    health_status: Dict[str, Any] = {"status": "healthy", "timestamp": _now(), "checks": {}}

    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {"status": "healthy"}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {"status": "unhealthy", "message": str(e)}

    # The broker only carries email; losing it degrades, it doesn't take us down
    try:
        redis.Redis.from_url(settings.REDIS_URL, socket_connect_timeout=2, socket_timeout=2).ping()
        health_status["checks"]["broker"] = {"status": "healthy"}
    except redis.RedisError as e:
        logger.warning(f"Broker health check failed: {e}")
        health_status["checks"]["broker"] = {"status": "degraded", "message": str(e)}

    health_status["checks"]["ai_providers"] = {
        "openai": bool(settings.OPENAI_API_KEY),
        "gemini": bool(settings.GEMINI_API_KEY),
        "nlp": settings.NLP_EXTRACTION_ENABLED,
    }
    return health_status
