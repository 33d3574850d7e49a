"""Shared fixtures for orchestration tests."""

import asyncio
from typing import Any, Awaitable, Callable

import pytest

from fetchwise.services import (
    OrchestratedClient,
    OrchestrationContext,
    RequestConfig,
    RetryScheduler,
)
from fetchwise.settings import Settings


class FakeTransport:
    """Counting transport that never looks at the cancellation token."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.handler: Callable[[RequestConfig], Awaitable[Any]] | None = None
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def send(self, config: RequestConfig) -> Any:
        self.calls.append(
            {
                "method": config.method,
                "url": config.url,
                "timeout": config.timeout,
                "retry_count": config.retry_count,
                "token": config.cancel_token,
            }
        )
        return await self._respond(config)

    async def _respond(self, config: RequestConfig) -> Any:
        if self.handler is not None:
            return await self.handler(config)
        return {"method": config.method, "url": config.url, "n": self.call_count}

    async def aclose(self) -> None:
        self.closed = True


class RecordingSleep:
    """Replacement for asyncio.sleep that records delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def context() -> OrchestrationContext:
    return OrchestrationContext()


@pytest.fixture
def client(
    fake_transport: FakeTransport,
    context: OrchestrationContext,
    recording_sleep: RecordingSleep,
    settings: Settings,
) -> OrchestratedClient:
    return OrchestratedClient(
        transport=fake_transport,
        context=context,
        scheduler=RetryScheduler(sleep=recording_sleep),
        settings=settings,
    )
