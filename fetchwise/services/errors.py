"""
Orchestration layer exceptions.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Terminal failure kinds surfaced to callers."""

    CANCEL = "Cancel"
    TRANSPORT = "Transport"
    RETRY_EXHAUSTED = "RetryExhausted"
    CONFIGURATION = "Configuration"


class OrchestrationError(Exception):
    """Base exception for orchestration errors."""

    kind: ErrorKind

    def __init__(self, message: str, key: str | None = None):
        self.key = key
        self.message = message
        super().__init__(message)


class CancelError(OrchestrationError):
    """Request was superseded by a newer request with the same key."""

    kind = ErrorKind.CANCEL


class TransportError(OrchestrationError):
    """Underlying transport call failed and no retry budget was configured."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, cause: BaseException, key: str | None = None):
        self.cause = cause
        super().__init__(
            f"Transport failed: {type(cause).__name__}: {cause}",
            key=key,
        )


class RetryExhaustedError(OrchestrationError):
    """Retry budget fully consumed."""

    kind = ErrorKind.RETRY_EXHAUSTED

    def __init__(self, last_error: BaseException, attempts: int, key: str | None = None):
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(
            f"Retry budget exhausted after {attempts} attempt(s), "
            f"last error: {type(last_error).__name__}: {last_error}",
            key=key,
        )


class ConfigurationError(OrchestrationError):
    """Request options failed validation."""

    kind = ErrorKind.CONFIGURATION
