"""
Poll/wait loop for asynchronous classification runs.

States: QUEUED -> IN_PROGRESS -> {COMPLETED | FAILED} | TIMED_OUT.
The loop checks the run status, sleeps for the poll interval and gives up
once the deadline passes. Clock and sleep are injectable so tests can
drive the deadline without waiting on the wall clock.

The poller only stops waiting; cancelling the remote run is up to the caller.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

from app.features.messaging.domain import ConversationRun, RunStatus
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

StatusFetcher = Callable[[ConversationRun], Awaitable[RunStatus]]


class RunPoller:
    """Waits for a run to reach a terminal status or the overall deadline."""

    def __init__(
        self,
        interval_seconds: float = 0.5,
        timeout_seconds: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self.interval_seconds = interval_seconds
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._sleep = sleep

    async def wait(self, run: ConversationRun, fetch_status: StatusFetcher) -> ConversationRun:
        """
        Poll ``fetch_status`` until the run is terminal.

        Args:
            run: Run as returned when it was created
            fetch_status: Coroutine returning the current status of the run

        Returns:
            The run in COMPLETED, FAILED or TIMED_OUT state
        """
        if run.status.is_terminal:
            return run

        deadline = self._clock() + self.timeout_seconds
        polls = 0

        while True:
            status = await fetch_status(run)
            polls += 1

            if status.is_terminal:
                logger.debug(
                    "Classification run finished",
                    run_id=run.run_id,
                    status=status.value,
                    polls=polls,
                )
                return run.with_status(status)

            run = run.with_status(status)

            remaining = deadline - self._clock()
            if remaining <= 0:
                logger.warning(
                    "Classification run timed out",
                    run_id=run.run_id,
                    last_status=status.value,
                    timeout_seconds=self.timeout_seconds,
                    polls=polls,
                )
                return run.with_status(RunStatus.TIMED_OUT)

            await self._sleep(min(self.interval_seconds, remaining))
