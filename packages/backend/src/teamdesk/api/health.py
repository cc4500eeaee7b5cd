"""Health check endpoint.

Learn: Open endpoint (no auth) that verifies the server is running
and the database answers. Redis is reported but optional, so it never
makes the service "degraded" on its own.
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from teamdesk import __version__
from teamdesk.db.engine import get_db
from teamdesk.redis_client import get_redis

logger = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check server health and dependency connectivity."""
    checks = {"version": __version__}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        logger.warning("health.database_error", error=str(e))
        checks["database"] = "error"

    try:
        await get_redis().ping()
        checks["redis"] = "ok"
    except RuntimeError:
        checks["redis"] = "disabled"
    except Exception as e:
        logger.warning("health.redis_error", error=str(e))
        checks["redis"] = "error"

    return {
        "status": "ok" if checks["database"] == "ok" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **checks,
    }
