"""Seedable random streams for cosmetic effect variation.

Each effect concern (miss displacement, miss rotation, ...) draws from its own
named stream derived from one master seed, so a test can pin every random
choice by seeding once, and adding a new stream never shifts the values an
existing one produces.

Usage:
    provider = RNGProvider(master_seed=12345)
    offsets = provider.get("effects.miss_offset")

    side = 1 if offsets.random() > 0.5 else -1

The provider is owned by whoever needs the streams (the engine, a test);
there is no shared module-level instance.

Domain naming convention (hierarchical):
    - "effects.miss_offset", "effects.miss_rotation"
    - "animations.<script name>"
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from strikefx.types import RandomSeed

T = TypeVar("T")


class RNGStream:
    """Proxy that delegates to the current RNG for a domain.

    Callers may cache the proxy at module level; after ``reset()`` it
    transparently picks up the freshly seeded generator.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self._domain = domain

    def _rng(self) -> Random:
        return self._provider._get_raw(self._domain)

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng().random()

    def uniform(self, a: float, b: float) -> float:
        """Return random float N such that a <= N <= b."""
        return self._rng().uniform(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        """Return random element from non-empty sequence."""
        return self._rng().choice(seq)


# Type alias for functions that accept either Random or RNGStream.
type RNG = Random | RNGStream


class RNGProvider:
    """Hands out one independent Random per named domain."""

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, Random] = {}
        self._proxies: dict[str, RNGStream] = {}

    def get(self, domain: str) -> RNGStream:
        """Get a cacheable stream proxy for ``domain``."""
        if domain not in self._proxies:
            self._proxies[domain] = RNGStream(self, domain)
        return self._proxies[domain]

    def _get_raw(self, domain: str) -> Random:
        if domain not in self._streams:
            if self._master_seed is None:
                self._streams[domain] = Random()
            else:
                # crc32 rather than hash(): hash() is salted per interpreter run
                derived_seed = zlib.crc32(f"{self._master_seed}:{domain}".encode())
                self._streams[domain] = Random(derived_seed)
        return self._streams[domain]

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Re-seed every stream. Existing proxies stay valid."""
        self._master_seed = master_seed
        self._streams.clear()

