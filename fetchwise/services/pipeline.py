"""
InterceptorPipeline - Pre-request and post-response hooks around a transport.

Pre-request:
- cancel_duplicated: supersede any pending request with the same key,
  then register this attempt's cancellation token

Post-response:
- success: unregister, store in cache when cache is enabled
- failure: unregister, then CancelError propagates as-is, retryable
  failures are handed to the RetryScheduler, anything else is wrapped in
  TransportError
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from fetchwise.services.cache import ResponseCache
from fetchwise.services.cancellation import CancellationToken, run_cancellable
from fetchwise.services.config import RequestConfig
from fetchwise.services.errors import CancelError, TransportError
from fetchwise.services.keys import derive_key
from fetchwise.services.registry import PendingRequestRegistry
from fetchwise.services.retry import RetryScheduler
from fetchwise.services.transport import Transport

CANCEL_MESSAGE = "Request canceled"


@dataclass
class OrchestrationContext:
    """Shared state for every request issued through one client."""

    registry: PendingRequestRegistry = field(default_factory=PendingRequestRegistry)
    cache: ResponseCache = field(default_factory=ResponseCache)


class InterceptorPipeline:
    """Hooks consulted by TransportInstance on every attempt."""

    def __init__(
        self,
        context: OrchestrationContext,
        scheduler: RetryScheduler | None = None,
        debug: bool = False,
    ):
        self.context = context
        self.scheduler = scheduler or RetryScheduler(debug=debug)
        self._debug = debug

    def before_request(self, config: RequestConfig) -> str:
        """Attach a fresh cancellation token and apply duplicate cancellation."""
        key = derive_key(config)
        token = CancellationToken()
        config.cancel_token = token

        if config.cancel_duplicated:
            self.context.registry.supersede(key, CANCEL_MESSAGE)
            self.context.registry.register(key, token)

        self._log(f"SEND: {config.method} {config.url} (key={key[:50]})")
        return key

    def after_response(self, config: RequestConfig, key: str, response: Any) -> Any:
        self.release(config, key)
        if config.cache:
            self.context.cache.put(key, response)
        return response

    def after_error(self, config: RequestConfig, key: str, error: Exception) -> float:
        """
        Classify a failed attempt.

        Returns:
            Delay in seconds before the next attempt

        Raises:
            CancelError: The attempt was superseded
            RetryExhaustedError: Retry budget consumed
            TransportError: Failure with no retry budget configured
        """
        self.release(config, key)

        if isinstance(error, CancelError):
            self._log(f"CANCELLED: {config.method} {config.url}")
            raise error

        if config.retry > 0:
            return self.scheduler.schedule_retry(config, error)

        raise TransportError(error, key=key) from error

    def release(self, config: RequestConfig, key: str) -> None:
        """Drop this attempt's pending entry, leaving newer requests untouched."""
        self.context.registry.unregister(key, config.cancel_token)

    def _log(self, message: str) -> None:
        if self._debug:
            logger.debug(f"[Pipeline] {message}")


class TransportInstance:
    """
    A transport with the pipeline attached, running one logical request.

    The pipeline rejects a superseded attempt itself, whether or not the
    transport observes the cancellation token.

    Retries re-enter the same loop with the same config object, so every
    attempt goes through the pre-request hook again and shares one
    retry_count.
    """

    def __init__(self, transport: Transport, pipeline: InterceptorPipeline):
        self._transport = transport
        self._pipeline = pipeline

    async def request(self, config: RequestConfig) -> Any:
        while True:
            key = self._pipeline.before_request(config)
            try:
                response = await run_cancellable(
                    self._transport.send(config), config.cancel_token
                )
                # A response that lands after supersession is discarded
                config.cancel_token.raise_if_cancelled()
            except asyncio.CancelledError:
                self._pipeline.release(config, key)
                raise
            except Exception as e:
                delay = self._pipeline.after_error(config, key, e)
                await self._pipeline.scheduler.sleep(delay)
                continue
            return self._pipeline.after_response(config, key, response)
