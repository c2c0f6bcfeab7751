from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

# Define generic types for keys and values
KeyType = TypeVar("KeyType")
ValueType = TypeVar("ValueType")


@dataclass
class CacheStats:
    """Statistics for a ResourceCache instance."""

    hits: int = 0
    misses: int = 0

    @property
    def total_lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        if self.total_lookups == 0:
            return 0.0
        return (self.hits / self.total_lookups) * 100.0

    def __repr__(self) -> str:
        return f"{self.hits} hits, {self.misses} misses ({self.hit_rate:.1f}% hit rate)"


class ResourceCache[KeyType, ValueType]:
    """
    A generic cache with optional Least Recently Used (LRU) eviction.

    With a positive ``max_size`` the least recently used entry is evicted once
    the cache is full. With ``max_size=None`` the cache grows without bound and
    entries only leave through ``clear()``.

    ``None`` is a legal cached value, so callers that cache negative results
    should test membership with ``in`` before calling ``get``.

    An optional `on_evict` callback can be provided to handle cleanup of
    evicted resources.
    """

    def __init__(
        self,
        name: str,
        max_size: int | None = 16,
        on_evict: Callable[[ValueType], None] | None = None,
    ) -> None:
        if max_size is not None and max_size <= 0:
            raise ValueError("Cache max_size must be a positive integer or None.")
        self.name = name
        self.max_size = max_size
        self._cache: OrderedDict[KeyType, ValueType] = OrderedDict()
        self.stats = CacheStats()
        self.on_evict = on_evict

    def get(self, key: KeyType) -> ValueType | None:
        """
        Retrieve an item from the cache.

        If the item is found, it's marked as recently used.
        Returns the item if found, otherwise None.
        """
        if key not in self._cache:
            self.stats.misses += 1
            return None

        # Hit! Move the key to the end to mark it as recently used.
        self._cache.move_to_end(key)
        self.stats.hits += 1
        return self._cache[key]

    def store(self, key: KeyType, value: ValueType) -> None:
        """
        Store an item in the cache.

        If the cache is bounded and full, the least recently used item is evicted.
        """
        self._cache[key] = value
        self._cache.move_to_end(key)

        if self.max_size is None:
            return

        while len(self._cache) > self.max_size:
            _evicted_key, evicted_value = self._cache.popitem(last=False)
            if self.on_evict:
                self.on_evict(evicted_value)

    def clear(self) -> None:
        """Clear all items from the cache and reset stats."""
        if self.on_evict:
            for value in self._cache.values():
                self.on_evict(value)

        self._cache.clear()
        self.stats = CacheStats()

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def __str__(self) -> str:
        """User-friendly string representation for reports."""
        return (
            f"{self.name} Cache: {self.stats.hits} hits, {self.stats.misses} misses "
            f"({self.stats.hit_rate:.1f}% hit rate)"
        )

    def __repr__(self) -> str:
        """More detailed representation for debugging."""
        limit = "unbounded" if self.max_size is None else self.max_size
        return (
            f"<{self.__class__.__name__} '{self.name}' "
            f"size={len(self)}/{limit}, stats={self.stats!r}>"
        )
