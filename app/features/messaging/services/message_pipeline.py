"""
Send-message pipeline: resolve tenant -> classify -> store.

Requests missing a message or tenant hash are accepted and ignored.
Classification that fails or times out is not an error either; the
outcome on the result tells the caller what actually happened. Storage
failures and everything else propagate to the API layer.
"""

from collections.abc import Callable

from app.features.messaging.domain import (
    ClassificationOutcome,
    PipelineResult,
    RunStatus,
)
from app.features.messaging.repository import MessageRepository
from app.features.messaging.services.classification_service import ClassificationService
from app.features.messaging.services.tenant_resolver import TenantResolver
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class MessagePipeline:
    """Runs one send-message request end to end, sequentially."""

    def __init__(
        self,
        resolver: TenantResolver,
        classifier_factory: Callable[[], ClassificationService],
        repository: type[MessageRepository] = MessageRepository,
    ):
        self.resolver = resolver
        self.classifier_factory = classifier_factory
        self.repository = repository

    async def handle(self, message: str | None, tenant_hash: str | None) -> PipelineResult:
        if not message or not tenant_hash:
            logger.info(
                "Send-message request missing fields, nothing to do",
                has_message=bool(message),
                has_tenant_hash=bool(tenant_hash),
            )
            return PipelineResult(outcome=ClassificationOutcome.SKIPPED_INVALID_REQUEST)

        destination = self.resolver.resolve(tenant_hash)

        # Constructed after the no-op check; missing assistant config raises here
        classifier = self.classifier_factory()
        result = await classifier.classify(message)

        if not result.has_label:
            outcome = (
                ClassificationOutcome.SKIPPED_TIMED_OUT
                if result.run.status == RunStatus.TIMED_OUT
                else ClassificationOutcome.SKIPPED_NO_LABEL
            )
            logger.warning(
                "Message not stored, classification produced no label",
                tenant_hash=tenant_hash,
                run_id=result.run.run_id,
                run_status=result.run.status.value,
                outcome=outcome.value,
            )
            return PipelineResult(
                outcome=outcome, destination=destination, run_id=result.run.run_id
            )

        stored = self.repository.build_message(message, result.bucket_label)
        await self.repository.insert(destination, stored)

        return PipelineResult(
            outcome=ClassificationOutcome.STORED,
            destination=destination,
            bucket_label=result.bucket_label,
            run_id=result.run.run_id,
        )
