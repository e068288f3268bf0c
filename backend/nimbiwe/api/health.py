"""Health check endpoint"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from nimbiwe.core.database import get_db
from nimbiwe.core.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Report service status and database connectivity."""
    database = {"connected": False, "error": None}
    try:
        await db.execute(text("SELECT 1"))
        database["connected"] = True
    except Exception as exc:
        logger.warning("Database health check failed", extra={"error": str(exc)})
        database["error"] = str(exc)

    return {
        "status": "ok" if database["connected"] else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": database,
    }
