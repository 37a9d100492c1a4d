"""
Persistence layer for classified messages.

Tenant tables are created out of band (see TenantRepository); this module
only ever inserts into them.
"""

from datetime import UTC, datetime

from psycopg import sql

from app.db.helpers import DatabaseError, execute_query
from app.features.messaging.domain import StoredMessage, TenantDestination
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class MessageWriteError(DatabaseError):
    """Raised when a classified message cannot be written to tenant storage."""


class MessageRepository:
    """Single-row inserts into ``messages_<tenant>`` tables."""

    INSERT_TEMPLATE = sql.SQL(
        "INSERT INTO {table} (message, analytics_bucket, created_at) VALUES (%s, %s, %s)"
    )

    @staticmethod
    def build_message(message: str, bucket_label: str) -> StoredMessage:
        """Stamp the row with the write time."""
        return StoredMessage(message=message, bucket_label=bucket_label, created_at=datetime.now(UTC))

    @classmethod
    async def insert(cls, destination: TenantDestination, stored: StoredMessage) -> None:
        """
        Insert one classified message. No upsert, no dedup.

        Raises:
            MessageWriteError: table missing (404), constraint violation (409),
                database unavailable (503) or any other failure (500)
        """
        query = cls.INSERT_TEMPLATE.format(table=sql.Identifier(destination.table_name))

        try:
            rowcount = await execute_query(
                query, (stored.message, stored.bucket_label, stored.created_at)
            )
        except DatabaseError as e:
            logger.error(
                "Failed to store classified message",
                tenant_hash=destination.tenant_hash,
                table=destination.table_name,
                code=e.code,
                sqlstate=e.sqlstate,
            )
            raise MessageWriteError(
                f"Could not store message for tenant {destination.tenant_hash}: {e}",
                operation="insert_message",
                code=e.code,
                sqlstate=e.sqlstate,
            ) from e

        if rowcount != 1:
            raise MessageWriteError(
                f"Expected to insert 1 row, inserted {rowcount}", operation="insert_message"
            )

        logger.info(
            "Classified message stored",
            tenant_hash=destination.tenant_hash,
            bucket_label=stored.bucket_label,
        )
