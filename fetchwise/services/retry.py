"""
RetryScheduler - Delayed re-issuance of failed requests within a retry budget.

Delay law (milliseconds), for the 1-indexed attempt k:
- callable retry_delay: retry_delay(k)
- retry_delay_rise:     retry_delay * k
- otherwise:            retry_delay
"""

import asyncio
from typing import Awaitable, Callable

from loguru import logger

from fetchwise.services.config import RequestConfig
from fetchwise.services.errors import RetryExhaustedError
from fetchwise.services.keys import derive_key


class RetryScheduler:
    """
    Decides whether a failed request may be re-issued and how long to wait.

    The caller owns the re-issue loop:

        while True:
            try:
                return await send(config)
            except Exception as e:
                await scheduler.wait_before_retry(config, e)
    """

    def __init__(
        self,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        debug: bool = False,
    ):
        self._sleep = sleep
        self._debug = debug

    @staticmethod
    def compute_delay(config: RequestConfig, attempt: int) -> int:
        """Delay in milliseconds before the given retry attempt."""
        if callable(config.retry_delay):
            return max(0, int(config.retry_delay(attempt)))
        factor = attempt if config.retry_delay_rise else 1
        return config.retry_delay * factor

    def schedule_retry(self, config: RequestConfig, last_error: BaseException) -> float:
        """
        Advance the retry counter and return the delay in seconds.

        Raises:
            RetryExhaustedError: If retry_count already reached the budget
        """
        if config.retry_count >= config.retry:
            raise RetryExhaustedError(
                last_error,
                attempts=config.retry_count + 1,
                key=derive_key(config),
            ) from last_error

        config.retry_count += 1
        delay_ms = self.compute_delay(config, config.retry_count)

        if (
            config.final_retry_timeout is not None
            and config.retry_count == config.retry
        ):
            config.timeout = config.final_retry_timeout

        self._log(
            f"RETRY {config.retry_count}/{config.retry} in {delay_ms}ms: "
            f"{config.method} {config.url} ({type(last_error).__name__}: {last_error})"
        )
        return delay_ms / 1000

    async def sleep(self, delay: float) -> None:
        """Non-blocking wait between attempts."""
        await self._sleep(delay)

    async def wait_before_retry(self, config: RequestConfig, last_error: BaseException) -> None:
        """Schedule the next attempt and suspend until it is due."""
        delay = self.schedule_retry(config, last_error)
        await self.sleep(delay)

    def _log(self, message: str) -> None:
        if self._debug:
            logger.debug(f"[Retry] {message}")
