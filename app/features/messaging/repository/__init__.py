"""
Repository subpackage for the messaging feature.
"""

from .message_repository import MessageRepository, MessageWriteError
from .tenant_repository import TenantProvisioningError, TenantRepository

__all__ = [
    "MessageRepository",
    "MessageWriteError",
    "TenantProvisioningError",
    "TenantRepository",
]
