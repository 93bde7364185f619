##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
A generic in-memory cache with per-entry TTL, bounded size and optional LRU eviction.

Expiry is lazy: an expired entry is treated as absent by `get` and `has` and is
dropped the moment either notices it, while `cleanup` sweeps every expired entry
at once. Capacity is a hard ceiling enforced on every `set`.

Each cache is owned by whoever constructs it (normally an entity manager) and
must be torn down with `close()`. A cache assumes a single process heap and is
not shared between processes.
"""

import json
import logging
import pickle
import threading
import time
import zlib
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, TypeVar


LOG = logging.getLogger(__name__)
T = TypeVar("T")

EvictCallback = Callable[[str, Any], None]


@dataclass
class CacheEntry(Generic[T]):
    """
    One cached value and its bookkeeping. Never handed out by the cache.

    Attributes:
        data: The cached value, or its compressed bytes.
        timestamp: Clock reading when the entry was stored.
        expires_at: Clock reading after which the entry is expired.
        access_count: Number of successful `get` calls.
        last_accessed: Clock reading of the last successful `get`.
        compressed: Whether `data` holds compressed bytes.
    """

    data: Any
    timestamp: float
    expires_at: float
    access_count: int = 0
    last_accessed: float = 0.0
    compressed: bool = False


class GenericCache(Generic[T]):  # pylint: disable=too-many-instance-attributes
    """
    A TTL cache with a size ceiling.

    When the cache is full, `set` first drops expired entries and then, if it
    is still full, evicts one entry: the least recently used one when LRU is
    enabled, the oldest inserted one otherwise. Capacity evictions and `clear`
    invoke `on_evict` with the key and value; `delete` and expiry remove silently.

    Attributes:
        name (str): A label used in log messages.
        max_size (int): The maximum number of entries.
        default_ttl (float): Seconds an entry lives when `set` is not given a TTL.
        enable_lru (bool): Evict least recently used entries rather than oldest inserted.
        enable_compression (bool): Store values pickled and zlib-compressed.
        on_evict (Callable[[str, Any], None]): Called with `(key, value)` for evicted and cleared entries.
        clock (Callable[[], float]): Returns the current time in seconds.

    Methods:
        set: Insert or overwrite an entry.
        get: Return a live entry's value and record the access.
        has: Check for a live entry without recording an access.
        delete: Remove an entry.
        clear: Remove every entry.
        cleanup: Remove every expired entry.
        warmup: Load missing keys through a loader.
        resolve: Return a cached value, loading and caching it on a miss.
        get_stats: Report size, expiry and access statistics.
        keys: List the keys of every live entry.
        close: Tear the cache down.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        max_size: int = 100,
        default_ttl: float = 300.0,
        enable_lru: bool = True,
        enable_compression: bool = False,
        on_evict: EvictCallback = None,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ):
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.name: str = name
        self.max_size: int = max_size
        self.default_ttl: float = default_ttl
        self.enable_lru: bool = enable_lru
        self.enable_compression: bool = enable_compression
        self.on_evict: Optional[EvictCallback] = on_evict
        self.clock: Callable[[], float] = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now > entry.expires_at

    def _pack(self, data: T) -> tuple:
        if not self.enable_compression:
            return data, False
        try:
            return zlib.compress(pickle.dumps(data)), True
        except (pickle.PicklingError, TypeError, AttributeError) as exc:
            LOG.debug(f"[{self.name}] Value could not be compressed, storing it as is: {exc}")
            return data, False

    def _unpack(self, entry: CacheEntry) -> T:
        if entry.compressed:
            return pickle.loads(zlib.decompress(entry.data))
        return entry.data

    def _remove(self, key: str, notify: bool = False) -> bool:
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        if notify and self.on_evict is not None:
            try:
                self.on_evict(key, self._unpack(entry))
            except Exception as exc:  # pylint: disable=broad-except
                LOG.error(f"[{self.name}] Eviction callback failed for key '{key}': {exc}")
        return True

    def _purge_expired(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            self._remove(key)
        return len(expired)

    def _evict_one(self):
        # OrderedDict order is access order with LRU enabled, insertion order otherwise
        victim = next(iter(self._entries))
        LOG.debug(f"[{self.name}] Evicting key '{victim}'.")
        self._remove(victim, notify=True)

    def set(self, key: str, data: T, ttl: float = None):
        """
        Insert or overwrite the entry for `key`.

        Args:
            key: The cache key.
            data: The value to cache.
            ttl: Seconds the entry lives. None or 0 falls back to `default_ttl`.
        """
        with self._lock:
            now = self.clock()
            lifetime = ttl if ttl else self.default_ttl

            if key not in self._entries and len(self._entries) >= self.max_size:
                self._purge_expired(now)
                if len(self._entries) >= self.max_size:
                    self._evict_one()

            payload, compressed = self._pack(data)
            self._entries[key] = CacheEntry(
                data=payload,
                timestamp=now,
                expires_at=now + lifetime,
                last_accessed=now,
                compressed=compressed,
            )
            if self.enable_lru:
                self._entries.move_to_end(key)

    def get(self, key: str) -> Optional[T]:
        """
        Return the value cached for `key`, recording the access.

        Args:
            key: The cache key.

        Returns:
            The cached value, or None if the key is missing or expired.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            now = self.clock()
            if self._is_expired(entry, now):
                self._remove(key)
                self._misses += 1
                return None

            entry.access_count += 1
            entry.last_accessed = now
            if self.enable_lru:
                self._entries.move_to_end(key)
            self._hits += 1
            return self._unpack(entry)

    def has(self, key: str) -> bool:
        """
        Check whether a live entry exists for `key`. Does not count as an
        access and does not change the eviction order.

        Args:
            key: The cache key.

        Returns:
            True if a live entry exists.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if self._is_expired(entry, self.clock()):
                self._remove(key)
                return False
            return True

    def delete(self, key: str) -> bool:
        """
        Remove the entry for `key`.

        Args:
            key: The cache key.

        Returns:
            True if an entry was removed.
        """
        with self._lock:
            return self._remove(key)

    def clear(self):
        """
        Remove every entry, invoking the eviction callback for each.
        """
        with self._lock:
            for key in list(self._entries.keys()):
                self._remove(key, notify=True)
            self._hits = 0
            self._misses = 0

    def cleanup(self) -> int:
        """
        Remove every expired entry.

        Returns:
            The number of entries removed.
        """
        with self._lock:
            removed = self._purge_expired(self.clock())
        if removed:
            LOG.debug(f"[{self.name}] Cleanup removed {removed} expired entries.")
        return removed

    def warmup(self, keys: Iterable[str], loader: Callable[[str], T], ttl: float = None) -> int:
        """
        Load every key that is not already cached. A loader failure is logged
        and does not stop the remaining keys from loading.

        Args:
            keys: The keys to warm.
            loader: Called with a key; returns the value to cache (None skips the key).
            ttl: Seconds the loaded entries live.

        Returns:
            The number of keys loaded.
        """
        loaded = 0
        for key in keys:
            if self.has(key):
                continue
            try:
                data = loader(key)
            except Exception as exc:  # pylint: disable=broad-except
                LOG.warning(f"[{self.name}] Warmup failed for key '{key}': {exc}")
                continue
            if data is not None:
                self.set(key, data, ttl)
                loaded += 1
        return loaded

    def resolve(self, key: str, loader: Callable[[], T], ttl: float = None) -> T:
        """
        Return the value cached for `key`, or call `loader` and cache its result.

        Args:
            key: The cache key.
            loader: Called with no arguments on a miss.
            ttl: Seconds a loaded entry lives.

        Returns:
            The cached or freshly loaded value. A None result is not cached.
        """
        data = self.get(key)
        if data is not None:
            return data
        data = loader()
        if data is not None:
            self.set(key, data, ttl)
        return data

    def keys(self) -> List[str]:
        """
        List the keys of every live entry, in eviction order.

        Returns:
            The keys of the entries that have not expired.
        """
        with self._lock:
            now = self.clock()
            return [key for key, entry in self._entries.items() if not self._is_expired(entry, now)]

    def _estimate_size(self, entry: CacheEntry) -> int:
        if entry.compressed:
            return len(entry.data)
        try:
            return len(json.dumps(entry.data, default=str)) * 2
        except (TypeError, ValueError):
            return len(repr(entry.data)) * 2

    def get_stats(self) -> Dict[str, Any]:
        """
        Report statistics about the cache.

        Returns:
            A dictionary with `size`, `max_size`, `expired_count`,
            `total_access_count`, `hit_rate` (0 to 1) and `memory_usage`
            (approximate bytes).
        """
        with self._lock:
            now = self.clock()
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "expired_count": sum(1 for entry in self._entries.values() if self._is_expired(entry, now)),
                "total_access_count": sum(entry.access_count for entry in self._entries.values()),
                "hit_rate": self._hits / lookups if lookups else 0.0,
                "memory_usage": sum(self._estimate_size(entry) for entry in self._entries.values()),
            }

    def close(self):
        """
        Tear the cache down: every entry is evicted and the callback is released.
        """
        self.clear()
        self.on_evict = None
        LOG.debug(f"[{self.name}] Cache closed.")
