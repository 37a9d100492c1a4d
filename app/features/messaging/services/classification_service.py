# app/features/messaging/services/classification_service.py
"""
Classification Service for incoming tenant messages.
Runs each message through a pre-configured OpenAI assistant and returns the
bucket label the assistant replied with.

One request = one fresh thread: no thread is reused between messages.
"""

from functools import lru_cache

import openai
from openai import AsyncOpenAI

from app.config import Settings, settings
from app.features.messaging.domain import (
    ClassificationResult,
    ConversationRun,
    RunStatus,
)
from app.features.messaging.services.run_poller import RunPoller
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

# OpenAI run statuses -> pipeline run statuses. Anything the classifier
# cannot recover from on its own (including requires_action, it has no tools)
# counts as a failure.
OPENAI_RUN_STATUS_MAP = {
    "queued": RunStatus.QUEUED,
    "in_progress": RunStatus.IN_PROGRESS,
    "cancelling": RunStatus.IN_PROGRESS,
    "completed": RunStatus.COMPLETED,
    "failed": RunStatus.FAILED,
    "cancelled": RunStatus.FAILED,
    "expired": RunStatus.FAILED,
    "incomplete": RunStatus.FAILED,
    "requires_action": RunStatus.FAILED,
}

MESSAGE_LIST_LIMIT = 20


class ClassificationServiceError(Exception):
    """Raised when the assistant service cannot be reached or misbehaves."""

    def __init__(self, message: str, code: int = 502):
        super().__init__(message)
        self.code = code


def map_run_status(raw_status: str | None) -> RunStatus:
    """Translate an OpenAI run status string."""
    status = OPENAI_RUN_STATUS_MAP.get(raw_status or "")
    if status is None:
        logger.warning("Unknown OpenAI run status, treating as failed", raw_status=raw_status)
        return RunStatus.FAILED
    return status


@lru_cache
def get_openai_client(api_key: str | None, timeout: float) -> AsyncOpenAI:
    """Async OpenAI client, shared by every service built with the same credentials."""
    if not api_key:
        raise ClassificationServiceError("OPENAI_API_KEY not configured in settings", code=500)

    logger.info("OpenAI client initialized", timeout=timeout)
    return AsyncOpenAI(api_key=api_key, timeout=timeout)


class ClassificationService:
    """
    Classifies a single message through the OpenAI Assistants API.

    Sequence: create thread -> add user message -> create run -> poll until
    terminal -> read the latest assistant reply as the label.
    """

    def __init__(
        self,
        config: Settings = settings,
        client: AsyncOpenAI | None = None,
        poller: RunPoller | None = None,
    ):
        if not config.OPENAI_ASSISTANT_ID:
            raise ClassificationServiceError(
                "OPENAI_ASSISTANT_ID not configured in settings", code=500
            )

        self.assistant_id = config.OPENAI_ASSISTANT_ID
        self.prompt_prefix = config.CLASSIFICATION_PROMPT_PREFIX
        self.default_label = config.DEFAULT_BUCKET_LABEL
        self.client = client or get_openai_client(
            config.OPENAI_API_KEY, config.OPENAI_TIMEOUT_SECONDS
        )
        self.poller = poller or RunPoller(
            interval_seconds=config.CLASSIFICATION_POLL_INTERVAL_SECONDS,
            timeout_seconds=config.CLASSIFICATION_TIMEOUT_SECONDS,
        )

    async def classify(self, message: str) -> ClassificationResult:
        """
        Classify a message.

        Args:
            message: Raw user message

        Returns:
            ClassificationResult with a label when the run completed, without
            one when it failed or timed out.

        Raises:
            ClassificationServiceError: If any call to the assistant service fails
        """
        try:
            run = await self.start_run(message)
            run = await self.poller.wait(run, self._fetch_run_status)

            if run.status != RunStatus.COMPLETED:
                logger.warning(
                    "Classification run did not complete",
                    run_id=run.run_id,
                    thread_id=run.conversation_id,
                    status=run.status.value,
                )
                if run.status == RunStatus.TIMED_OUT:
                    await self.cancel_run(run)
                return ClassificationResult(run=run)

            label = await self.extract_label(run)

        except openai.APIStatusError as e:
            logger.error(
                "Assistant service rejected request",
                status_code=e.status_code,
                error=str(e),
            )
            raise ClassificationServiceError(
                f"Assistant service error: {e}", code=e.status_code
            ) from e
        except openai.APITimeoutError as e:
            logger.error("Assistant service timed out", error=str(e))
            raise ClassificationServiceError("Assistant service timed out", code=504) from e
        except openai.APIError as e:
            logger.error("Assistant service unreachable", error=str(e), error_type=type(e).__name__)
            raise ClassificationServiceError(f"Assistant service unavailable: {e}", code=502) from e

        if label is None:
            logger.info("Completed run had no usable label, using default", run_id=run.run_id)
            return ClassificationResult(
                run=run, bucket_label=self.default_label, used_default_label=True
            )

        logger.info("Message classified", run_id=run.run_id, bucket_label=label)
        return ClassificationResult(run=run, bucket_label=label)

    async def start_run(self, message: str) -> ConversationRun:
        """Open a thread, post the message and start the classifier run."""
        thread = await self.client.beta.threads.create()

        await self.client.beta.threads.messages.create(
            thread.id,
            role="user",
            content=f"{self.prompt_prefix}{message}",
        )

        run = await self.client.beta.threads.runs.create(
            thread_id=thread.id,
            assistant_id=self.assistant_id,
        )

        logger.debug(
            "Classification run started",
            thread_id=thread.id,
            run_id=run.id,
            message_length=len(message),
        )

        return ConversationRun(
            run_id=run.id,
            conversation_id=thread.id,
            status=map_run_status(run.status),
        )

    async def extract_label(self, run: ConversationRun) -> str | None:
        """First text part of the most recent assistant message, if any."""
        page = await self.client.beta.threads.messages.list(
            run.conversation_id,
            order="desc",
            limit=MESSAGE_LIST_LIMIT,
        )

        for thread_message in page.data:
            if thread_message.role != "assistant":
                continue

            if not thread_message.content:
                return None

            first_part = thread_message.content[0]
            if getattr(first_part, "type", None) != "text":
                return None

            # Stored exactly as the assistant wrote it; whitespace-only counts as empty
            value = first_part.text.value
            return value if value and value.strip() else None

        return None

    async def cancel_run(self, run: ConversationRun) -> None:
        """
        Ask the assistant service to stop a run we stopped waiting for.

        Best effort: a failed cancel is logged and the timed-out result still
        stands. The run may already have finished on the remote side.
        """
        try:
            await self.client.beta.threads.runs.cancel(run.run_id, thread_id=run.conversation_id)
        except openai.APIError as e:
            logger.warning(
                "Could not cancel timed-out classification run",
                run_id=run.run_id,
                thread_id=run.conversation_id,
                error=str(e),
            )
            return

        logger.info("Timed-out classification run cancelled", run_id=run.run_id)

    async def _fetch_run_status(self, run: ConversationRun) -> RunStatus:
        latest = await self.client.beta.threads.runs.retrieve(
            run.run_id,
            thread_id=run.conversation_id,
        )
        return map_run_status(latest.status)
