"""
PendingRequestRegistry - Tracks the in-flight request for each key.

When a newer request with the same key starts, the older one is
superseded: its cancellation token is triggered and the caller awaiting
it receives a CancelError.
"""

from typing import Any

from loguru import logger

from fetchwise.services.cancellation import CancellationToken
from fetchwise.services.errors import CancelError


class PendingRequestRegistry:
    """
    Holds at most one cancellation token per key.

    All operations are synchronous. Within a single event loop,
    ``supersede`` followed by ``register`` runs without a suspension
    point, so no lock is needed.

    Usage:
        registry = PendingRequestRegistry()

        registry.supersede(key, "Request canceled")
        registry.register(key, token)
        try:
            response = await send(token)
        finally:
            registry.unregister(key, token)
    """

    def __init__(self, debug: bool = False):
        self._pending: dict[str, CancellationToken] = {}
        self._debug = debug
        self._stats = RegistryStats()

    def supersede(self, key: str, cancel_message: str) -> bool:
        """
        Cancel the pending request registered under key, if any.

        Returns:
            True if a pending request was cancelled
        """
        token = self._pending.pop(key, None)
        if token is None:
            return False

        self._stats.superseded += 1
        self._log(f"SUPERSEDE: {key[:50]}...")
        try:
            token.trigger(CancelError(cancel_message, key=key))
        except Exception as e:
            # Cleanup is best effort, the new request must still go out
            logger.warning(f"Failed to cancel pending request {key[:50]}: {e}")
        return True

    def register(self, key: str, token: CancellationToken) -> bool:
        """Store token under key unless an entry already exists."""
        if key in self._pending:
            return False
        self._pending[key] = token
        self._stats.registered += 1
        self._log(f"REGISTER: {key[:50]}...")
        return True

    def unregister(self, key: str, token: CancellationToken | None = None) -> bool:
        """
        Remove the entry for key.

        When token is given, the entry is removed only if it is that token,
        so a finished request never drops a newer request's entry.
        """
        current = self._pending.get(key)
        if current is None:
            return False
        if token is not None and current is not token:
            return False
        del self._pending[key]
        self._log(f"UNREGISTER: {key[:50]}...")
        return True

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def pending_keys(self) -> list[str]:
        return list(self._pending.keys())

    def cancel_all(self, cancel_message: str = "Request canceled") -> int:
        """Cancel every pending request. Returns the number cancelled."""
        count = 0
        for key in list(self._pending):
            if self.supersede(key, cancel_message):
                count += 1
        if count:
            self._log(f"CANCEL_ALL: {count} requests cancelled")
        return count

    def get_stats(self) -> "RegistryStats":
        self._stats.in_flight = len(self._pending)
        return self._stats

    def __len__(self) -> int:
        return len(self._pending)

    def _log(self, message: str) -> None:
        """Log debug message if debug mode is enabled."""
        if self._debug:
            logger.debug(f"[Registry] {message}")


class RegistryStats:
    """Statistics for the pending-request registry."""

    def __init__(self):
        self.registered: int = 0  # Tokens stored
        self.superseded: int = 0  # Requests cancelled by a newer duplicate
        self.in_flight: int = 0  # Current pending entries

    def to_dict(self) -> dict[str, Any]:
        return {
            "registered": self.registered,
            "superseded": self.superseded,
            "in_flight": self.in_flight,
        }
