"""
Service layer - orchestration of outgoing HTTP requests.

Provides:
- derive_key: Identity key shared by dedup and cache
- PendingRequestRegistry: Cancels superseded duplicate requests
- ResponseCache: Unbounded in-memory response cache
- RetryScheduler: Bounded retry with linear or custom backoff
- InterceptorPipeline: Hooks wiring the above around a transport
- OrchestratedClient: Unified client combining all of them
"""

from fetchwise.services.errors import (
    ErrorKind,
    OrchestrationError,
    CancelError,
    TransportError,
    RetryExhaustedError,
    ConfigurationError,
)
from fetchwise.services.cancellation import CancellationToken, run_cancellable
from fetchwise.services.config import RequestConfig, RetryDelay
from fetchwise.services.keys import default_key, derive_key
from fetchwise.services.registry import PendingRequestRegistry, RegistryStats
from fetchwise.services.cache import ResponseCache, CacheStats
from fetchwise.services.retry import RetryScheduler
from fetchwise.services.transport import Transport, HttpxTransport
from fetchwise.services.pipeline import (
    InterceptorPipeline,
    OrchestrationContext,
    TransportInstance,
)
from fetchwise.services.client import OrchestratedClient, get_client, close_client

__all__ = [
    # Errors
    "ErrorKind",
    "OrchestrationError",
    "CancelError",
    "TransportError",
    "RetryExhaustedError",
    "ConfigurationError",
    # Cancellation
    "CancellationToken",
    "run_cancellable",
    # Config
    "RequestConfig",
    "RetryDelay",
    # Keys
    "default_key",
    "derive_key",
    # Registry
    "PendingRequestRegistry",
    "RegistryStats",
    # Cache
    "ResponseCache",
    "CacheStats",
    # Retry
    "RetryScheduler",
    # Transport
    "Transport",
    "HttpxTransport",
    # Pipeline
    "InterceptorPipeline",
    "OrchestrationContext",
    "TransportInstance",
    # Client
    "OrchestratedClient",
    "get_client",
    "close_client",
]
