"""Process-scoped cache for books listing results."""
import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from typing import Any

logger = logging.getLogger(__name__)


class BooksCache:
    """
    In-memory cache of books listing results.

    Entries are keyed by the listing filter (role, user id). Invalidation is
    always wholesale: `invalidate()` drops every entry, there is no per-key
    eviction. There is no locking; two concurrent misses may both compute and
    the last write wins, which is harmless because entries are never patched
    in place. A compute that started before an invalidate() is returned to its
    caller but not stored.
    """

    def __init__(self, ttl_seconds: int = 0, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Initialize the cache.

        Args:
            ttl_seconds: Entry lifetime; 0 keeps entries until invalidate().
            clock: Monotonic time source (injectable for tests).
        """
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}
        # Bumped by invalidate(); results computed under an older generation are dropped
        self._generation = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable) -> Any | None:
        """Return a live cached value, or None on miss/expiry."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._ttl and self._clock() - stored_at >= self._ttl:
            del self._entries[key]
            return None
        return value

    async def get_or_compute(
        self,
        key: Hashable,
        compute: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Return the cached value for key, computing and storing it on a miss.

        Exceptions from compute propagate and nothing is stored.
        """
        value = self.get(key)
        if value is not None:
            logger.debug("books_cache_hit key=%s", key)
            return value
        logger.debug("books_cache_miss key=%s", key)
        generation = self._generation
        value = await compute()
        if generation == self._generation:
            self._entries[key] = (self._clock(), value)
        else:
            logger.debug("books_cache_discard key=%s", key)
        return value

    def invalidate(self) -> None:
        """Drop every cached entry."""
        self._generation += 1
        self._entries.clear()
        logger.info("Books cache cleared")


# Global cache state using a container to avoid global statement
class _BooksCacheState:
    """Container for the process-wide books cache."""

    cache: BooksCache | None = None


_state = _BooksCacheState()


def get_books_cache() -> BooksCache:
    """
    Get the process-wide books cache (FastAPI dependency).

    Raises:
        RuntimeError: If called before the app lifespan created the cache.
    """
    if _state.cache is None:
        raise RuntimeError("Books cache is not initialized")
    return _state.cache


def set_books_cache(cache: BooksCache | None) -> None:
    """Set the process-wide books cache."""
    _state.cache = cache
