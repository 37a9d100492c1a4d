"""
Tenant hash → storage destination.

The hash arrives straight from the request body and ends up as part of a
table name, so it is checked against a strict allow-list before use.
"""

import re

from app.config import Settings, settings
from app.features.messaging.domain import TenantDestination

TENANT_HASH_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
POSTGRES_MAX_IDENTIFIER_LENGTH = 63


class InvalidTenantError(ValueError):
    """Raised when a tenant hash cannot be turned into a table name."""

    code = 400


def validate_tenant_hash(tenant_hash: str, *, prefix: str = "") -> str:
    """Return the hash unchanged or raise InvalidTenantError."""
    if not tenant_hash:
        raise InvalidTenantError("Tenant hash must not be empty")
    if not TENANT_HASH_PATTERN.fullmatch(tenant_hash):
        raise InvalidTenantError("Tenant hash must be alphanumeric")
    if len(prefix) + len(tenant_hash) > POSTGRES_MAX_IDENTIFIER_LENGTH:
        raise InvalidTenantError("Tenant hash is too long")
    return tenant_hash


class TenantResolver:
    """Derives the messages table for a tenant using a fixed naming convention."""

    def __init__(self, config: Settings = settings):
        self.prefix = config.MESSAGE_TABLE_PREFIX

    def resolve(self, tenant_hash: str) -> TenantDestination:
        validate_tenant_hash(tenant_hash, prefix=self.prefix)
        return TenantDestination(tenant_hash=tenant_hash, table_name=f"{self.prefix}{tenant_hash}")
