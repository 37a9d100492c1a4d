"""
Domain subpackage for the messaging feature.
"""

from .models import (
    TERMINAL_RUN_STATUSES,
    ClassificationOutcome,
    ClassificationResult,
    ConversationRun,
    PipelineResult,
    RunStatus,
    StoredMessage,
    TenantDestination,
)

__all__ = [
    "TERMINAL_RUN_STATUSES",
    "ClassificationOutcome",
    "ClassificationResult",
    "ConversationRun",
    "PipelineResult",
    "RunStatus",
    "StoredMessage",
    "TenantDestination",
]
