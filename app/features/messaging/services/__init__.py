"""
Service layer for the messaging feature.
"""

from .classification_service import ClassificationService, ClassificationServiceError
from .message_pipeline import MessagePipeline
from .run_poller import RunPoller
from .tenant_resolver import InvalidTenantError, TenantResolver

__all__ = [
    "ClassificationService",
    "ClassificationServiceError",
    "InvalidTenantError",
    "MessagePipeline",
    "RunPoller",
    "TenantResolver",
]
