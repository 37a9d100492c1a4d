# app/routes/health.py
"""
Health check endpoints: liveness and readiness.
"""

import time

from fastapi import APIRouter

from app.config import settings
from app.db.postgres import check_db

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "message-classifier"}


@router.get("/readyz")
async def readyz():
    """
    Readiness check: database reachable through the pool, required settings present.
    """
    checks = {}
    overall_ok = True

    # 1) Database
    t0 = time.time()
    db_result = await check_db()
    checks["database"] = {
        "ok": db_result is True,
        "latency_ms": round((time.time() - t0) * 1000, 1),
    }
    if db_result is not True:
        checks["database"]["error"] = db_result
        overall_ok = False

    # 2) Configuration
    config_issues = []

    if not settings.SUPABASE_DB_URL:
        config_issues.append("SUPABASE_DB_URL not set")

    if not settings.OPENAI_API_KEY:
        config_issues.append("OPENAI_API_KEY not set")

    if not settings.OPENAI_ASSISTANT_ID:
        config_issues.append("OPENAI_ASSISTANT_ID not set")

    checks["configuration"] = {
        "ok": not config_issues,
        "issues": config_issues or None,
        "environment": settings.environment,
    }
    overall_ok = overall_ok and not config_issues

    return {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}
