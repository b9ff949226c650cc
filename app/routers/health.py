"""Health check endpoint."""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(db: Annotated[AsyncSession, Depends(get_db)]):
    """Report server and database status. 503 when the database is unreachable."""
    report = {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "checks": {
            "database": {"status": "healthy", "message": "Database reachable"},
        },
    }

    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database probe failed: {e}")
        report["status"] = "unhealthy"
        report["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database check failed: {e}",
        }
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=report)

    return report
