"""
OrchestratedClient - Public entry point for orchestrated HTTP requests.

Combines:
- ResponseCache for serving repeated requests from memory
- PendingRequestRegistry for cancelling superseded duplicates
- RetryScheduler for re-issuing failed requests with backoff
"""

from typing import Any

from loguru import logger

from fetchwise.services.config import RequestConfig
from fetchwise.services.keys import derive_key
from fetchwise.services.pipeline import (
    InterceptorPipeline,
    OrchestrationContext,
    TransportInstance,
)
from fetchwise.services.retry import RetryScheduler
from fetchwise.services.transport import HttpxTransport, Transport
from fetchwise.settings import Settings, global_settings


class OrchestratedClient:
    """
    HTTP client with response caching, duplicate cancellation and retry.

    Usage:
        client = OrchestratedClient()

        # Cached request
        response = await client.request(url="https://api.example.com/items", cache=True)

        # Cancel any previous search still in flight, retry twice on failure
        response = await client.get(
            "https://api.example.com/search",
            params={"q": "abc"},
            cancel_duplicated=True,
            retry=2,
            retry_delay=100,
        )
    """

    def __init__(
        self,
        transport: Transport | None = None,
        context: OrchestrationContext | None = None,
        scheduler: RetryScheduler | None = None,
        settings: Settings | None = None,
    ):
        self._settings = settings or global_settings
        debug = self._settings.debug

        self._transport = transport or HttpxTransport(
            timeout=self._settings.request_timeout
        )
        self.context = context or OrchestrationContext()
        self._pipeline = InterceptorPipeline(
            self.context,
            scheduler=scheduler or RetryScheduler(debug=debug),
            debug=debug,
        )
        self._debug = debug

    def build_config(
        self,
        config: RequestConfig | dict[str, Any] | None = None,
        **options: Any,
    ) -> RequestConfig:
        """Merge config and keyword options over the defaults into a fresh RequestConfig."""
        if isinstance(config, RequestConfig):
            merged = config.explicit_options()
        else:
            merged = dict(config or {})
        merged.update(options)
        return RequestConfig.build(merged, self._settings)

    async def request(
        self,
        config: RequestConfig | dict[str, Any] | None = None,
        **options: Any,
    ) -> Any:
        """
        Issue a request.

        Args:
            config: Base options, as a RequestConfig or a dict
            **options: Options overriding config

        Returns:
            The transport response, possibly served from cache

        Raises:
            ConfigurationError: If the options are invalid
            CancelError: If a newer duplicate superseded this request
            TransportError: If the request failed with no retry budget
            RetryExhaustedError: If every retry attempt failed
        """
        request_config = self.build_config(config, **options)

        if request_config.cache:
            key = derive_key(request_config)
            if key in self.context.cache:
                cached = self.context.cache.get(key)
                if self._debug:
                    logger.debug(
                        f"Serving {request_config.method} {request_config.url} from cache"
                    )
                return cached

        instance = TransportInstance(self._transport, self._pipeline)
        return await instance.request(request_config)

    async def get(self, url: str, **options: Any) -> Any:
        return await self.request(method="GET", url=url, **options)

    async def post(self, url: str, **options: Any) -> Any:
        return await self.request(method="POST", url=url, **options)

    async def put(self, url: str, **options: Any) -> Any:
        return await self.request(method="PUT", url=url, **options)

    async def patch(self, url: str, **options: Any) -> Any:
        return await self.request(method="PATCH", url=url, **options)

    async def delete(self, url: str, **options: Any) -> Any:
        return await self.request(method="DELETE", url=url, **options)

    def get_stats(self) -> dict[str, Any]:
        """Registry and cache statistics."""
        return {
            "cache": self.context.cache.get_stats().to_dict(),
            "registry": self.context.registry.get_stats().to_dict(),
        }

    async def close(self) -> None:
        """Cancel pending requests and close the transport."""
        self.context.registry.cancel_all()
        await self._transport.aclose()
        logger.debug("OrchestratedClient closed")

    async def __aenter__(self) -> "OrchestratedClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


# Global client instance
_global_client: OrchestratedClient | None = None


def get_client() -> OrchestratedClient:
    """Get the global client instance."""
    global _global_client
    if _global_client is None:
        _global_client = OrchestratedClient()
    return _global_client


async def close_client() -> None:
    """Close the global client."""
    global _global_client
    if _global_client:
        await _global_client.close()
        _global_client = None
