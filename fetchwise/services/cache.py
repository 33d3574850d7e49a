"""
ResponseCache - In-memory response cache keyed by request identity.

Entries never expire and are never evicted; a later successful request
with caching enabled overwrites the stored response (last write wins).
"""

from typing import Any

from loguru import logger


class ResponseCache:
    """
    Unbounded key -> response map.

    Usage:
        cache = ResponseCache()

        response = cache.get(key)
        if response is None:
            response = await fetch()
            cache.put(key, response)
    """

    def __init__(self, debug: bool = False):
        self._memory: dict[str, Any] = {}
        self._debug = debug
        self._stats = CacheStats()

    def get(self, key: str) -> Any | None:
        """Return the stored response for key, or None."""
        if key not in self._memory:
            self._stats.misses += 1
            self._log(f"MISS: {key[:50]}...")
            return None

        self._stats.hits += 1
        self._log(f"HIT: {key[:50]}...")
        return self._memory[key]

    def put(self, key: str, response: Any) -> None:
        """Store response under key, replacing any previous entry."""
        self._memory[key] = response
        self._stats.stores += 1
        self._log(f"SET: {key[:50]}...")

    def delete(self, key: str) -> bool:
        if key in self._memory:
            del self._memory[key]
            self._log(f"DELETE: {key[:50]}...")
            return True
        return False

    def clear(self) -> int:
        """Drop every entry. Returns the number removed."""
        count = len(self._memory)
        self._memory.clear()
        self._log(f"CLEAR: {count} entries removed")
        return count

    def get_stats(self) -> "CacheStats":
        self._stats.size = len(self._memory)
        return self._stats

    def __contains__(self, key: object) -> bool:
        return key in self._memory

    def __len__(self) -> int:
        return len(self._memory)

    def _log(self, message: str) -> None:
        """Log debug message if debug mode is enabled."""
        if self._debug:
            logger.debug(f"[Cache] {message}")


class CacheStats:
    """Cache statistics."""

    def __init__(self):
        self.hits: int = 0
        self.misses: int = 0
        self.stores: int = 0
        self.size: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "stores": self.stores,
            "size": self.size,
            "hit_rate": f"{self.hit_rate:.2%}",
        }
