from types import SimpleNamespace
from unittest.mock import AsyncMock


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def assistant_message(text: str | None, role: str = "assistant"):
    if text is None:
        content = []
    else:
        content = [SimpleNamespace(type="text", text=SimpleNamespace(value=text))]
    return SimpleNamespace(role=role, content=content)


class FakeAssistantClient:
    """
    Stand-in for AsyncOpenAI exposing only the beta.threads calls we use.

    ``statuses`` is the sequence returned by successive runs.retrieve calls;
    the last one repeats once the list is exhausted.
    """

    def __init__(self, statuses=("completed",), replies=None, initial_status="queued"):
        self._statuses = list(statuses)
        self.replies = replies if replies is not None else [assistant_message("Billing")]

        self.threads_create = AsyncMock(return_value=SimpleNamespace(id="thread_1"))
        self.messages_create = AsyncMock(return_value=SimpleNamespace(id="msg_1"))
        self.runs_create = AsyncMock(
            return_value=SimpleNamespace(id="run_1", thread_id="thread_1", status=initial_status)
        )
        self.runs_retrieve = AsyncMock(side_effect=self._next_run)
        self.runs_cancel = AsyncMock(
            return_value=SimpleNamespace(id="run_1", thread_id="thread_1", status="cancelling")
        )
        self.messages_list = AsyncMock(side_effect=self._list_messages)

        self.beta = SimpleNamespace(
            threads=SimpleNamespace(
                create=self.threads_create,
                messages=SimpleNamespace(create=self.messages_create, list=self.messages_list),
                runs=SimpleNamespace(
                    create=self.runs_create,
                    retrieve=self.runs_retrieve,
                    cancel=self.runs_cancel,
                ),
            )
        )

    async def _next_run(self, run_id, *, thread_id):
        status = self._statuses.pop(0) if len(self._statuses) > 1 else self._statuses[0]
        return SimpleNamespace(id=run_id, thread_id=thread_id, status=status)

    async def _list_messages(self, thread_id, **kwargs):
        return SimpleNamespace(data=list(self.replies))
