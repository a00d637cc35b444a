"""
Health Check Endpoints

Endpoints:
- /health/live  - Basic liveness (app is running)
- /health/ready - Readiness check (both databases answer and tables exist)
"""

from fastapi import APIRouter, HTTPException, status
from typing import Any, Dict
import asyncio
import time

from sqlalchemy import text

from app.core.config import settings
from app.core.database import get_activity_session_local, get_session_local
from app.core.logging_config import logger
from app.core.types import utcnow


router = APIRouter(prefix="/health", tags=["Health Checks"])


async def check_database(session_factory, check_table: str) -> Dict[str, Any]:
    """Check connectivity and that ``check_table`` is queryable"""
    start = time.time()
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))

            try:
                await session.execute(text(f"SELECT COUNT(*) FROM {check_table}"))
                tables_ok = True
            except Exception:
                tables_ok = False

            return {
                "status": "healthy",
                "latency_ms": round((time.time() - start) * 1000, 2),
                "connection": "ok",
                "tables_ready": tables_ok,
            }
    except Exception as e:
        logger.error(f"[HealthCheck] Database check failed: {e}")
        return {
            "status": "unhealthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "connection": "failed",
            "tables_ready": False,
            "error": str(e),
        }


@router.get("/live")
async def liveness_check():
    """
    Liveness check - indicates the application is running.
    """
    return {
        "status": "alive",
        "timestamp": utcnow().isoformat(),
        "app": settings.APP_NAME,
    }


@router.get("/ready")
async def readiness_check():
    """
    Readiness check - 200 only when both the relational store and the
    activity log store are reachable.
    """
    db_check, activity_check = await asyncio.gather(
        check_database(get_session_local(), "users"),
        check_database(get_activity_session_local(), "activity_logs"),
    )

    is_ready = all(
        check.get("status") == "healthy" and check.get("tables_ready", False)
        for check in (db_check, activity_check)
    )

    response = {
        "status": "ready" if is_ready else "not_ready",
        "timestamp": utcnow().isoformat(),
        "checks": {
            "database": db_check,
            "activity_log_database": activity_check,
        }
    }

    if not is_ready:
        logger.warning(f"[HealthCheck] Readiness check failed: {response}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not ready"
        )

    return response
