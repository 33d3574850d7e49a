"""
CancellationToken - Cooperative cancellation handle for a single request attempt.
"""

import asyncio
from typing import Awaitable, TypeVar

from fetchwise.services.errors import CancelError

T = TypeVar("T")


class CancellationToken:
    """
    One-shot cancellation signal observed by the transport.

    Usage:
        token = CancellationToken()

        # elsewhere
        token.trigger(CancelError("superseded"))

        # in the transport
        await token.wait()
        raise token.reason
    """

    def __init__(self):
        self._reason: CancelError | None = None
        self._event: asyncio.Event | None = None

    @property
    def reason(self) -> CancelError | None:
        return self._reason

    def is_cancelled(self) -> bool:
        return self._reason is not None

    def trigger(self, reason: CancelError) -> bool:
        """Cancel the attempt. Returns False if it was already cancelled."""
        if self._reason is not None:
            return False
        self._reason = reason
        if self._event is not None:
            self._event.set()
        return True

    async def wait(self) -> CancelError:
        """Block until the token is triggered, then return the reason."""
        # Event is created lazily so tokens can be built outside a running loop
        if self._event is None:
            self._event = asyncio.Event()
            if self._reason is not None:
                self._event.set()
        await self._event.wait()
        assert self._reason is not None
        return self._reason

    def raise_if_cancelled(self) -> None:
        if self._reason is not None:
            raise self._reason

    def __repr__(self) -> str:
        state = "cancelled" if self.is_cancelled() else "active"
        return f"<CancellationToken {state}>"


async def run_cancellable(
    awaitable: Awaitable[T],
    token: CancellationToken | None,
) -> T:
    """
    Await awaitable unless token fires first.

    On cancellation the underlying task is cancelled and the token's
    CancelError is raised. If both finish together the result wins.
    """
    if token is None:
        return await awaitable

    work = asyncio.ensure_future(awaitable)
    watcher = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait(
            {work, watcher}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        work.cancel()
        raise
    finally:
        if not watcher.done():
            watcher.cancel()

    if work in done:
        return work.result()

    work.cancel()
    await asyncio.gather(work, return_exceptions=True)
    raise watcher.result()
