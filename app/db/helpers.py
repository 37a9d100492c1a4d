# app/db/helpers.py
"""
Database helper functions for common patterns.
Reduces boilerplate in the repository layer.
"""

from typing import Any

import psycopg
from psycopg import errors

from app.db.pool import PoolNotReadyError, get_db_connection
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class DatabaseError(Exception):
    """
    Custom exception for database operations.

    ``code`` is the HTTP status the failure maps to; ``sqlstate`` is the
    Postgres error code when the server reported one.
    """

    def __init__(
        self,
        message: str,
        operation: str = "unknown",
        code: int = 500,
        sqlstate: str | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.code = code
        self.sqlstate = sqlstate


def status_for_db_error(error: Exception) -> int:
    """Map a psycopg (or pool) failure onto an HTTP status code."""
    if isinstance(error, errors.UndefinedTable | errors.UndefinedFunction):
        return 404
    if isinstance(error, psycopg.IntegrityError):
        return 409
    if isinstance(error, psycopg.DataError):
        return 400
    if isinstance(error, psycopg.OperationalError | PoolNotReadyError):
        return 503
    return 500


async def execute_query(
    query: Any, params: tuple = (), *, connection: psycopg.AsyncConnection | None = None
) -> int:
    """
    Execute query and return number of affected rows.

    Args:
        query: SQL string or composed psycopg.sql object with %s placeholders
        params: Query parameters
        connection: Optional existing connection

    Returns:
        Number of affected rows
    """
    try:
        if connection:
            cursor = await connection.execute(query, params)
            return cursor.rowcount
        else:
            async with await get_db_connection() as conn:
                cursor = await conn.execute(query, params)
                return cursor.rowcount

    except (psycopg.Error, PoolNotReadyError) as e:
        logger.error(
            "Database execute error",
            error=str(e),
            error_type=type(e).__name__,
            sqlstate=getattr(e, "sqlstate", None),
        )
        raise DatabaseError(
            f"Query failed: {e}",
            operation="execute",
            code=status_for_db_error(e),
            sqlstate=getattr(e, "sqlstate", None),
        ) from e


async def fetch_val(
    query: Any, params: tuple = (), *, connection: psycopg.AsyncConnection | None = None
) -> Any:
    """
    Execute query and return single value.

    Args:
        query: SQL string or composed psycopg.sql object with %s placeholders
        params: Query parameters
        connection: Optional existing connection

    Returns:
        Single value from first column of first row
    """
    try:
        if connection:
            async with connection.cursor() as cur:
                await cur.execute(query, params)
                row = await cur.fetchone()
        else:
            async with await get_db_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, params)
                    row = await cur.fetchone()

    except (psycopg.Error, PoolNotReadyError) as e:
        logger.error(
            "Database fetch_val error",
            error=str(e),
            error_type=type(e).__name__,
            sqlstate=getattr(e, "sqlstate", None),
        )
        raise DatabaseError(
            f"Query failed: {e}",
            operation="fetch_val",
            code=status_for_db_error(e),
            sqlstate=getattr(e, "sqlstate", None),
        ) from e

    if not row:
        return None
    return list(row.values())[0] if isinstance(row, dict) else row[0]
