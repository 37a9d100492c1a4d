"""
Database connectivity check used by the readiness check.
"""

from app.db.helpers import fetch_val
from app.db.pool import db_pool
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


async def check_db():
    """
    Returns True if SELECT 1 succeeds through the pool, otherwise the error string.
    """
    if not db_pool.is_ready:
        return "Database pool not initialized"

    try:
        value = await fetch_val("SELECT 1")

        if value == 1:
            return True
        else:
            return "Unexpected result from database check"

    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        return str(e)
