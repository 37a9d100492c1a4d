"""
Domain models for the messaging feature.

Lightweight dataclasses shared by the classifier, the poller, the
repositories and the API layer. None of them outlive a single request.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum


class RunStatus(str, Enum):
    """Lifecycle of one classification run."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_RUN_STATUSES


TERMINAL_RUN_STATUSES = frozenset({RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.TIMED_OUT})


class ClassificationOutcome(str, Enum):
    """What the pipeline did with a request; returned to the caller."""

    STORED = "stored"
    SKIPPED_NO_LABEL = "skipped_no_label"
    SKIPPED_TIMED_OUT = "skipped_timed_out"
    SKIPPED_INVALID_REQUEST = "skipped_invalid_request"


@dataclass(frozen=True, slots=True)
class TenantDestination:
    """Tenant-scoped table a classified message is written to."""

    tenant_hash: str
    table_name: str


@dataclass(frozen=True, slots=True)
class ConversationRun:
    """One classification attempt against the assistant service."""

    run_id: str
    conversation_id: str
    status: RunStatus

    def with_status(self, status: RunStatus) -> "ConversationRun":
        if self.status.is_terminal and status != self.status:
            raise ValueError(f"Run {self.run_id} already terminal ({self.status.value})")
        return replace(self, status=status)


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """
    Label produced for a message.

    ``bucket_label`` is only set when the run completed; ``used_default_label``
    marks a completed run whose reply carried no usable text.
    """

    run: ConversationRun
    bucket_label: str | None = None
    used_default_label: bool = False

    @property
    def has_label(self) -> bool:
        return self.bucket_label is not None


@dataclass(frozen=True, slots=True)
class StoredMessage:
    """Row written to a tenant's messages table."""

    message: str
    bucket_label: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Result of one send-message request."""

    outcome: ClassificationOutcome
    destination: TenantDestination | None = None
    bucket_label: str | None = None
    run_id: str | None = None
