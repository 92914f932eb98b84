"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
from datetime import datetime, timezone
import platform

from fastapi import APIRouter, Depends
from sqlalchemy import text

from api.dependencies import get_db_session_factory
from artmarket import __version__


router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns system health status.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "artmarket",
        "version": __version__,
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(session_factory=Depends(get_db_session_factory)):
    """
    Readiness check endpoint.

    Reports whether the database answers a trivial query.
    """
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        database = f"error: {e}"

    return {
        "status": "ready" if database == "ok" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {"api": "ok", "database": database},
    }
