"""Health check endpoint."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from adapter.sql.connection import ping
from api.context import AppContext
from api.dependencies import get_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(context: AppContext = Depends(get_context)):
    """Health check endpoint with repository backend status."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "environment": context.settings.environment,
        "services": {},
    }

    overall_healthy = True

    if context.engine is None:
        health_status["services"]["repository"] = {
            "status": "healthy",
            "backend": context.backend,
            "message": "In-memory store",
        }
    elif ping(context.engine):
        health_status["services"]["repository"] = {
            "status": "healthy",
            "backend": context.backend,
            "message": "Connection successful",
        }
    else:
        health_status["services"]["repository"] = {
            "status": "unhealthy",
            "backend": context.backend,
            "message": "Connection failed",
        }
        overall_healthy = False

    if not overall_healthy:
        health_status["status"] = "degraded"
        logger.warning("Health check degraded", extra={"backend": context.backend})

    status_code = status.HTTP_200_OK if overall_healthy else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        content=health_status,
        status_code=status_code
    )
