"""
Tenant storage provisioning.

The schema lives in the database function ``create_tables_for_user(hash)``;
this repository only calls it.
"""

from app.db.helpers import DatabaseError, fetch_val
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class TenantProvisioningError(DatabaseError):
    """Raised when tenant tables could not be created."""


class TenantRepository:
    @staticmethod
    async def create_tables(tenant_hash: str) -> None:
        try:
            await fetch_val("SELECT create_tables_for_user(%s)", (tenant_hash,))
        except DatabaseError as e:
            raise TenantProvisioningError(
                f"Could not provision tables for tenant {tenant_hash}: {e}",
                operation="create_tables_for_user",
                code=e.code,
                sqlstate=e.sqlstate,
            ) from e

        logger.info("Tenant tables provisioned", tenant_hash=tenant_hash)
