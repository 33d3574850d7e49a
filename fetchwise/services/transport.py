"""
Transport - The capability that performs the actual network call.

The orchestration layer only needs ``send(config)``; HttpxTransport is the
default implementation over a shared ``httpx.AsyncClient``.
"""

from typing import Any, Protocol, runtime_checkable

import httpx
from loguru import logger

from fetchwise.services.cancellation import run_cancellable
from fetchwise.services.config import RequestConfig


@runtime_checkable
class Transport(Protocol):
    """Issues a single request attempt."""

    async def send(self, config: RequestConfig) -> Any:
        """
        Perform the call described by config.

        Implementations should observe ``config.cancel_token`` and raise its
        CancelError when it fires before the response arrives.
        """
        ...

    async def aclose(self) -> None: ...


class HttpxTransport:
    """
    Transport over httpx.AsyncClient.

    Non-2xx responses are raised as httpx.HTTPStatusError so they count as
    failures for retry purposes.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        base_url: str = "",
    ):
        self._timeout = timeout
        self._base_url = base_url
        self._http_client = client
        self._owns_client = client is None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout),
            )
        return self._http_client

    async def send(self, config: RequestConfig) -> httpx.Response:
        client = await self._get_http_client()
        return await run_cancellable(
            self._execute_request(client, config),
            config.cancel_token,
        )

    async def _execute_request(
        self,
        client: httpx.AsyncClient,
        config: RequestConfig,
    ) -> httpx.Response:
        """Execute the actual HTTP request."""
        response = await client.request(
            method=config.method,
            url=config.url,
            **config.transport_options(),
        )
        response.raise_for_status()
        return response

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("HttpxTransport closed")
