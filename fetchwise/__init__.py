"""
fetchwise - Request orchestration over an async HTTP transport.

Logging goes through loguru's global logger. Applications that want the
level from FETCHWISE_LOG_LEVEL call ``setup_logging()`` once at startup.
"""

from fetchwise.log import setup_logging
from fetchwise.services import (
    CancelError,
    OrchestratedClient,
    RequestConfig,
    RetryExhaustedError,
    TransportError,
    close_client,
    get_client,
)

__all__ = [
    "CancelError",
    "OrchestratedClient",
    "RequestConfig",
    "RetryExhaustedError",
    "TransportError",
    "close_client",
    "get_client",
    "setup_logging",
]
