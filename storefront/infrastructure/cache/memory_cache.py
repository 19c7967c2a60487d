import copy
import threading
import time
from typing import Any, Callable, Dict, Optional

from storefront.core.logging import get_logger

logger = get_logger(__name__)


class CacheItem:
    """Class representing a cached item with expiration."""

    def __init__(self, value: Any, expires_at: Optional[float] = None):
        """
        Initialize a cache item.

        Args:
            value: Cached value
            expires_at: Expiration timestamp
        """
        self.value = value
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        """
        Check if the item has expired.

        Returns:
            True if expired
        """
        if self.expires_at is None:
            return False
        return now > self.expires_at


class MemoryCache:
    """
    Process-local TTL cache.

    Expired items are dropped when they are next read. Writes also sweep
    the whole cache at most once per cleanup interval, so keys that are
    never read again do not pile up in a warm process.
    """

    def __init__(
        self,
        default_ttl: int = 300,
        cleanup_interval: int = 60,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize the in-memory cache.

        Args:
            default_ttl: Default TTL in seconds
            cleanup_interval: Minimum seconds between sweeps of expired items
            clock: Source of the current time as a UNIX timestamp
        """
        self.default_ttl = default_ttl
        self.cleanup_interval = cleanup_interval
        self.clock = clock
        self._cache: Dict[str, CacheItem] = {}
        self._lock = threading.RLock()
        self._next_cleanup = clock() + cleanup_interval

    def _build_key(self, key: str, namespace: Optional[str] = None) -> str:
        """
        Build a cache key with optional namespace.

        Args:
            key: Original key
            namespace: Optional namespace, e.g. the kind of value cached

        Returns:
            Namespaced key
        """
        if namespace:
            return f"{namespace}:{key}"
        return key

    async def get(self, key: str, namespace: Optional[str] = None) -> Any:
        """
        Get item from cache.

        Args:
            key: Cache key
            namespace: Optional namespace

        Returns:
            Cached value or None if not found or expired
        """
        full_key = self._build_key(key, namespace)

        with self._lock:
            item = self._cache.get(full_key)

            if item is None:
                logger.debug(f"Cache miss for key: {full_key}")
                return None

            if item.is_expired(self.clock()):
                del self._cache[full_key]
                logger.debug(f"Cache miss (expired) for key: {full_key}")
                return None

            # Return deep copy of value to prevent mutations
            logger.debug(f"Cache hit for key: {full_key}")
            return copy.deepcopy(item.value)

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
        namespace: Optional[str] = None
    ) -> bool:
        """
        Set item in cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl: TTL in seconds; zero or less keeps the item until deleted
            namespace: Optional namespace

        Returns:
            True if successful
        """
        full_key = self._build_key(key, namespace)
        effective_ttl = ttl if ttl is not None else self.default_ttl

        expires_at = None
        if effective_ttl > 0:
            expires_at = self.clock() + effective_ttl

        item = CacheItem(value=copy.deepcopy(value), expires_at=expires_at)

        with self._lock:
            self._cache[full_key] = item
            now = self.clock()
            if now >= self._next_cleanup:
                self._cleanup_expired(now)
                self._next_cleanup = now + self.cleanup_interval

        logger.debug(f"Set cache key {full_key} with TTL {effective_ttl}s")
        return True

    async def delete(self, key: str, namespace: Optional[str] = None) -> bool:
        """
        Remove item from cache.

        Returns:
            True if key was found and deleted
        """
        full_key = self._build_key(key, namespace)

        with self._lock:
            if full_key in self._cache:
                del self._cache[full_key]
                return True
        return False

    def _cleanup_expired(self, now: float) -> int:
        """
        Remove all expired items. Caller must hold the lock.

        Returns:
            Number of items removed
        """
        expired_keys = [key for key, item in self._cache.items() if item.is_expired(now)]
        for key in expired_keys:
            del self._cache[key]

        if expired_keys:
            logger.debug(f"Cleaned up {len(expired_keys)} expired cache items")
        return len(expired_keys)
