from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from strikefx.util.caching import ResourceCache


def test_get_counts_hits_and_misses() -> None:
    cache: ResourceCache[str, int] = ResourceCache("Test", max_size=4)
    cache.store("a", 1)

    assert cache.get("a") == 1
    assert cache.get("b") is None
    assert cache.stats.hits == 1
    assert cache.stats.misses == 1
    assert cache.stats.hit_rate == pytest.approx(50.0)


def test_bounded_cache_evicts_least_recently_used() -> None:
    on_evict = MagicMock()
    cache: ResourceCache[str, int] = ResourceCache(
        "Test", max_size=2, on_evict=on_evict
    )
    cache.store("a", 1)
    cache.store("b", 2)
    cache.get("a")  # "b" is now the least recently used
    cache.store("c", 3)

    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache
    on_evict.assert_called_once_with(2)


def test_unbounded_cache_never_evicts() -> None:
    cache: ResourceCache[int, int] = ResourceCache("Test", max_size=None)
    for i in range(100):
        cache.store(i, i)

    assert len(cache) == 100
    assert "unbounded" in repr(cache)


def test_none_is_a_cacheable_value() -> None:
    cache: ResourceCache[str, int | None] = ResourceCache("Test", max_size=None)
    cache.store("broken", None)

    assert "broken" in cache
    assert cache.get("broken") is None
    assert cache.stats.hits == 1


def test_clear_evicts_everything() -> None:
    on_evict = MagicMock()
    cache: ResourceCache[str, int] = ResourceCache("Test", on_evict=on_evict)
    cache.store("a", 1)
    cache.store("b", 2)

    cache.get("b")
    cache.clear()
    assert len(cache) == 0
    assert on_evict.call_count == 2
    assert cache.stats.total_lookups == 0


@pytest.mark.parametrize("size", [0, -3])
def test_rejects_non_positive_size(size: int) -> None:
    with pytest.raises(ValueError, match="positive integer or None"):
        ResourceCache("Test", max_size=size)
