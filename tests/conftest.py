import threading
import typing as t

import pytest

from structlog_stackdriver.types import WriteData


class FakeClient:
    """In-memory LoggingClient that records every payload it receives."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.payloads: list[WriteData] = []
        self.closed = False
        self.written = threading.Event()

    def write(self, payload: WriteData) -> None:
        self.written.set()
        if self.error is not None:
            raise self.error
        self.payloads.append(payload)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def failing_client() -> FakeClient:
    return FakeClient(error=RuntimeError("backend unavailable"))


@pytest.fixture
def hook(fake_client: FakeClient) -> t.Iterator[t.Any]:
    from structlog_stackdriver.hook import StackdriverHook

    hook = StackdriverHook(fake_client, "default_log")
    yield hook
    hook.close()
