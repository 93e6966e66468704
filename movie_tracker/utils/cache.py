"""
Caching Utilities
=================
In-memory cache store used by TMDBService to keep upstream responses.

Features:
- Named cache policies (stale / revalidate / expire windows)
- Fresh / stale / expired entry states
- Tag-based invalidation (e.g. "trending", "movie-550")
- LRU (Least Recently Used) eviction
- Hit / miss statistics

Usage:
    from movie_tracker.utils.cache import CacheStore, POLICIES

    store = CacheStore(max_size=1000)
    store.set(key, payload, POLICIES["trending"], tags=("trending",))

    entry = store.get_entry(key)
    if entry and entry.is_fresh(store.now()):
        return entry.value
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Tuple
from collections import OrderedDict
import hashlib
import json
import logging
import threading
import time

logger = logging.getLogger(__name__)

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR


@dataclass(frozen=True)
class CachePolicy:
    """
    Time windows (seconds) governing one class of TMDB endpoints.

    - stale: entry is served straight from cache while younger than this
    - revalidate: shared caches may keep serving it up to this age
    - expire: entry is dropped once it reaches this age
    """
    name: str
    stale: int
    revalidate: int
    expire: int

    def __post_init__(self):
        if not 0 <= self.stale <= self.revalidate <= self.expire:
            raise ValueError(
                f"Cache policy '{self.name}' must satisfy stale <= revalidate <= expire "
                f"(got {self.stale}, {self.revalidate}, {self.expire})"
            )

    def cache_control(self) -> str:
        """HTTP Cache-Control header value matching this policy"""
        return (
            f"public, max-age={self.stale}, s-maxage={self.revalidate}, "
            f"stale-while-revalidate={self.expire - self.revalidate}"
        )


POLICIES: Dict[str, CachePolicy] = {
    "trending": CachePolicy("trending", stale=HOUR, revalidate=2 * HOUR, expire=DAY),
    "movie": CachePolicy("movie", stale=DAY, revalidate=2 * DAY, expire=7 * DAY),
    "search": CachePolicy("search", stale=5 * MINUTE, revalidate=10 * MINUTE, expire=HOUR),
    "genres": CachePolicy("genres", stale=DAY, revalidate=7 * DAY, expire=30 * DAY),
}


@dataclass
class CacheEntry:
    key: str
    value: Any
    policy: CachePolicy
    stored_at: float
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def age(self, now: float) -> float:
        return now - self.stored_at

    def is_fresh(self, now: float) -> bool:
        return self.age(now) < self.policy.stale

    def is_expired(self, now: float) -> bool:
        return self.age(now) >= self.policy.expire


def make_key(operation: str, locale: str, page: int, params: Iterable[Tuple[str, Any]]) -> str:
    """
    Create a unique cache key from the operation and every call parameter.

    Args:
        operation: Name of the cached operation (e.g. "get_popular")
        locale: Response language
        page: Page number
        params: (name, value) pairs of the remaining parameters

    Returns:
        MD5 hex digest of a stable JSON encoding
    """
    key_data = {
        'op': operation,
        'locale': locale,
        'page': page,
        'params': sorted((str(name), value) for name, value in params),
    }
    key_str = json.dumps(key_data, sort_keys=True, default=str)
    return hashlib.md5(key_str.encode()).hexdigest()


class CacheStore:
    """
    Simple in-memory cache with policy-based expiry and LRU eviction.
    Cache is per-process (not shared across workers).
    """

    def __init__(self, max_size: int = 1000, clock: Callable[[], float] = time.time):
        """
        Initialize cache store.

        Args:
            max_size: Maximum number of items in cache (LRU eviction)
            clock: Returns the current time in seconds (injectable for tests)
        """
        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._max_size = max_size
        self._clock = clock
        self._lock = threading.Lock()
        self._hits = 0
        self._stale_hits = 0
        self._misses = 0
        self._evictions = 0

    def now(self) -> float:
        return self._clock()

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """
        Get the entry under key, fresh or stale.

        Expired entries are removed and reported as a miss.
        """
        now = self.now()
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None

            if entry.is_expired(now):
                del self._cache[key]
                self._misses += 1
                return None

            self._cache.move_to_end(key)
            if entry.is_fresh(now):
                self._hits += 1
            else:
                self._stale_hits += 1
            return entry

    def get(self, key: str) -> Optional[Any]:
        """Value under key if it is still fresh, else None"""
        entry = self.get_entry(key)
        if entry is None or not entry.is_fresh(self.now()):
            return None
        return entry.value

    def set(self, key: str, value: Any, policy: CachePolicy, tags: Iterable[str] = ()) -> CacheEntry:
        """
        Store value under key, stamped with the current time.

        Args:
            key: Cache key
            value: Value to cache
            policy: Policy governing freshness and expiry
            tags: Labels used for group invalidation
        """
        entry = CacheEntry(key=key, value=value, policy=policy, stored_at=self.now(), tags=tuple(tags))
        with self._lock:
            self._cache[key] = entry
            self._cache.move_to_end(key)

            # Evict oldest if over max_size (LRU)
            while len(self._cache) > self._max_size:
                oldest_key, _ = self._cache.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Evicted cache key: {oldest_key}")
        return entry

    def delete(self, key: str) -> None:
        """Delete a specific cache key."""
        with self._lock:
            self._cache.pop(key, None)

    def invalidate_tag(self, tag: str) -> int:
        """
        Drop every entry carrying tag.

        Returns:
            Number of entries removed
        """
        with self._lock:
            keys = [key for key, entry in self._cache.items() if tag in entry.tags]
            for key in keys:
                del self._cache[key]
        logger.info(f"Invalidated {len(keys)} cache entries tagged '{tag}'")
        return len(keys)

    def clear(self) -> None:
        """Clear all cache."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._stale_hits = 0
            self._misses = 0
            self._evictions = 0
        logger.info("Cache cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        with self._lock:
            size = len(self._cache)
            hits, stale_hits, misses, evictions = self._hits, self._stale_hits, self._misses, self._evictions

        total_requests = hits + stale_hits + misses
        hit_rate = (hits / total_requests * 100) if total_requests > 0 else 0

        return {
            'size': size,
            'max_size': self._max_size,
            'hits': hits,
            'stale_hits': stale_hits,
            'misses': misses,
            'evictions': evictions,
            'hit_rate': f"{hit_rate:.2f}%",
            'policies': {
                name: {'stale': p.stale, 'revalidate': p.revalidate, 'expire': p.expire}
                for name, p in POLICIES.items()
            },
        }
