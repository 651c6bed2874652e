"""
LFU Cache: Thread-Safe Approximate LFU with Watermark Eviction

Keeps string keys mapped to opaque values and counts how often each entry
is read. Instead of maintaining a strict frequency ranking on every access,
the cache evicts in batches:

1. Watermarks: when a new key arrives and the population has reached
   upper_bound, (upper_bound - lower_bound) entries are pruned first.
2. Batch Selection: one stable sort by frequency per pass; the tail of the
   sorted list (the least frequently used entries) is dropped.
3. Aging: every survivor of a pass has its frequency reset to 1, so keys
   that were hot early cannot become unevictable.

If either watermark is 0 the cache is unbounded and only shrinks on
explicit evict() calls.

All public methods run under a single cache-wide lock. Set performs the
size check, the eviction pass and the insert in one critical section, so no
concurrent caller can observe the cache above upper_bound after an insert.
"""

import threading
from typing import Any, Dict, Generic, List, Optional, TypeVar

from .logging import get_logger

logger = get_logger(__name__)

V = TypeVar("V")


def _check_bound(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _warn_if_inverted(upper: int, lower: int):
    if upper != 0 and lower != 0 and upper <= lower:
        # Evicting (upper - lower) entries would be a no-op; cache grows
        logger.warning(
            "lfu_cache_watermarks_inverted",
            upper_bound=upper,
            lower_bound=lower,
        )


def _log_eviction(trigger: str, requested: int, removed: int, remaining: int):
    logger.debug(
        "lfu_cache_evicted",
        trigger=trigger,
        requested=requested,
        removed=removed,
        remaining=remaining,
    )


class Entry:
    """Index record pairing a key with its value and access frequency."""

    __slots__ = ('key', 'value', 'freq')

    def __init__(self, key: str, value: Any):
        self.key = key
        self.value = value
        self.freq = 1


class LFUCache(Generic[V]):
    """
    A bounded, thread-safe cache with approximate LFU eviction.

    Usage:
        cache = LFUCache(upper_bound=1000, lower_bound=800)
        cache.set("key", value)
        value = cache.get("key")  # None on miss, bumps frequency on hit

    Modes:
    - Unbounded (upper_bound == 0 or lower_bound == 0): set() never evicts
    - Bounded (both > 0): inserting a new key at population >= upper_bound
      evicts down to lower_bound first

    Note:
        Values escape the lock when returned. Treat them as read-only
        unless the value type is itself thread-safe.
    """

    __slots__ = (
        '_upper', '_lower', '_index', '_lock',
        'hits', 'misses', 'evictions', 'evicted',
    )

    def __init__(self, upper_bound: int = 0, lower_bound: int = 0):
        """
        Initialize an empty cache.

        Args:
            upper_bound: High-water mark that triggers an eviction pass (0 disables)
            lower_bound: Population targeted by an eviction pass (0 disables)

        Raises:
            TypeError: If a bound is not an int
            ValueError: If a bound is negative
        """
        self._upper = _check_bound('upper_bound', upper_bound)
        self._lower = _check_bound('lower_bound', lower_bound)
        self._index: Dict[str, Entry] = {}
        self._lock = threading.Lock()

        # Statistics (informational only, never used for eviction)
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.evicted = 0

        _warn_if_inverted(self._upper, self._lower)

    # -- configuration -------------------------------------------------------

    @property
    def upper_bound(self) -> int:
        return self._upper

    @upper_bound.setter
    def upper_bound(self, value: int) -> None:
        value = _check_bound('upper_bound', value)
        with self._lock:
            self._upper = value
            bounds = (self._upper, self._lower)
        _warn_if_inverted(*bounds)

    @property
    def lower_bound(self) -> int:
        return self._lower

    @lower_bound.setter
    def lower_bound(self, value: int) -> None:
        value = _check_bound('lower_bound', value)
        with self._lock:
            self._lower = value
            bounds = (self._upper, self._lower)
        _warn_if_inverted(*bounds)

    def configure(self, upper_bound: int, lower_bound: int) -> None:
        """Set both watermarks at once."""
        upper_bound = _check_bound('upper_bound', upper_bound)
        lower_bound = _check_bound('lower_bound', lower_bound)
        with self._lock:
            self._upper = upper_bound
            self._lower = lower_bound
        _warn_if_inverted(upper_bound, lower_bound)

    @property
    def bounded(self) -> bool:
        """True when automatic eviction is enabled."""
        with self._lock:
            return self._is_bounded()

    def _is_bounded(self) -> bool:
        """Caller must hold self._lock."""
        return self._upper != 0 and self._lower != 0

    # -- lookups -------------------------------------------------------------

    def has(self, key: str) -> bool:
        """Return True if key is present. Does not change its frequency."""
        with self._lock:
            return key in self._index

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._index

    def get(self, key: str) -> Optional[V]:
        """
        Read a value and count the access.

        Args:
            key: The key to look up

        Returns:
            The stored value, or None if the key is absent
        """
        with self._lock:
            entry = self._index.get(key)
            if entry is None:
                self.misses += 1
                return None
            self.hits += 1
            entry.freq += 1
            return entry.value

    def get_frequency(self, key: str) -> int:
        """Return the access frequency of key, or 0 if it is absent."""
        with self._lock:
            entry = self._index.get(key)
            return entry.freq if entry is not None else 0

    def keys(self) -> List[str]:
        """Return a snapshot list of the keys currently cached (unordered)."""
        with self._lock:
            return list(self._index)

    def __len__(self) -> int:
        with self._lock:
            return len(self._index)

    # -- mutation ------------------------------------------------------------

    def set(self, key: str, value: V) -> None:
        """
        Store value under key.

        Overwriting an existing key keeps its frequency. A new key starts at
        frequency 1; in bounded mode, if the population has reached
        upper_bound, an eviction pass of (upper_bound - lower_bound) entries
        runs first, within the same critical section.
        """
        pass_info = None
        with self._lock:
            entry = self._index.get(key)
            if entry is not None:
                entry.value = value
                return

            if self._is_bounded() and len(self._index) >= self._upper:
                requested = self._upper - self._lower
                removed = self._evict_locked(requested)
                pass_info = (requested, removed, len(self._index))

            self._index[key] = Entry(key, value)

        # Logged outside the lock; remaining excludes the new entry
        if pass_info is not None:
            _log_eviction('watermark', *pass_info)

    def evict(self, count: int) -> int:
        """
        Remove up to count of the least frequently used entries.

        Surviving entries have their frequency reset to 1.

        Args:
            count: Number of entries to remove; clamped to [0, len(cache)]

        Returns:
            Number of entries actually removed
        """
        with self._lock:
            removed = self._evict_locked(count)
            remaining = len(self._index)
        _log_eviction('explicit', count, removed, remaining)
        return removed

    def _evict_locked(self, count: int) -> int:
        """Eviction pass. Caller must hold self._lock."""
        count = max(0, min(count, len(self._index)))

        if count:
            # Stable: equal frequencies keep insertion order, so the
            # most recently inserted among ties are dropped first
            ranked = sorted(self._index.values(), key=lambda e: e.freq, reverse=True)
            for entry in ranked[len(ranked) - count:]:
                del self._index[entry.key]

        # Aging
        for entry in self._index.values():
            entry.freq = 1

        self.evictions += 1
        self.evicted += count
        return count

    def clear(self) -> None:
        """Remove all entries without counting an eviction pass."""
        with self._lock:
            removed = len(self._index)
            self._index.clear()
        logger.debug("lfu_cache_cleared", removed=removed)

    # -- statistics ----------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        """Return current cache statistics."""
        with self._lock:
            lookups = self.hits + self.misses
            hit_rate = self.hits / lookups if lookups else 0.0
            return {
                'size': len(self._index),
                'upper_bound': self._upper,
                'lower_bound': self._lower,
                'bounded': self._is_bounded(),
                'hits': self.hits,
                'misses': self.misses,
                'hit_rate': f'{hit_rate:.1%}',
                'evictions': self.evictions,
                'evicted': self.evicted,
            }

    def reset_stats(self) -> None:
        """Zero the hit/miss/eviction counters."""
        with self._lock:
            self.hits = 0
            self.misses = 0
            self.evictions = 0
            self.evicted = 0

    def __repr__(self) -> str:
        with self._lock:
            return (
                f"LFUCache(upper_bound={self._upper}, lower_bound={self._lower}, "
                f"len={len(self._index)})"
            )
