"""Deterministic random number generation with isolated streams.

Each subsystem (stimulus flicker, memory rolls, wander targets, ...) gets its
own independent random stream derived from a master seed. This ensures that:

1. A world is fully reproducible from the same master seed
2. Changes to one system's random consumption don't cascade to others
3. Tests can pin behavior by seeding the provider they hand to a World

There is no module-level provider: every World owns one.

Usage:
    provider = RNGProvider("zombie1")
    flicker_rng = provider.get("perception.flicker")
    flicker = flicker_rng.uniform(0.9, 1.15)

Domain naming convention (hierarchical):
    - "perception.flicker"
    - "memory.light"
    - "agents.timers", "agents.wander", "agents.spawn", "agents.chase_override"
"""

from __future__ import annotations

import zlib
from random import Random
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from shambler.types import RandomSeed


class RNGStream:
    """Proxy that delegates to the current RNG for a domain.

    This wrapper allows callers to cache a reference that survives reset().
    All method calls are forwarded to the underlying Random instance,
    which is looked up fresh each time from the provider.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self._domain = domain

    def _rng(self) -> Random:
        """Get the current underlying RNG."""
        return self._provider._get_raw(self._domain)

    # -------------------------------------------------------------------------
    # Random method proxies
    # -------------------------------------------------------------------------

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng().random()

    def uniform(self, a: float, b: float) -> float:
        """Return random float N such that a <= N <= b."""
        return self._rng().uniform(a, b)

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self._rng().random() < probability

    def between(self, bounds: tuple[float, float]) -> float:
        """Return a uniform draw from a (low, high) range."""
        low, high = bounds
        return self._rng().uniform(low, high)


# Type alias for functions that accept either Random or RNGStream.
RNG: TypeAlias = Random | RNGStream


class RNGProvider:
    """Provides isolated RNG streams for different simulation subsystems.

    Each domain gets its own Random instance derived deterministically
    from the master seed. Domains are identified by string names.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, Random] = {}
        self._proxies: dict[str, RNGStream] = {}

    @property
    def master_seed(self) -> RandomSeed:
        return self._master_seed

    def get(self, domain: str) -> RNGStream:
        """Get an RNG stream for the named domain.

        Returns a proxy object that can be cached. The proxy automatically
        uses the current underlying RNG, even after reset().
        """
        if domain not in self._proxies:
            self._proxies[domain] = RNGStream(self, domain)
        return self._proxies[domain]

    def _get_raw(self, domain: str) -> Random:
        """Get the raw Random instance for a domain (internal use)."""
        if domain not in self._streams:
            if self._master_seed is None:
                # No seed: use system entropy for non-deterministic behavior
                self._streams[domain] = Random()
            else:
                # crc32 rather than hash(): hash() is salted per process via
                # PYTHONHASHSEED and would break cross-session determinism.
                derived_seed = zlib.crc32(f"{self._master_seed}:{domain}".encode())
                self._streams[domain] = Random(derived_seed)
        return self._streams[domain]

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Reset all streams with a new master seed.

        Existing RNGStream proxies remain valid and will use the new streams.
        """
        self._master_seed = master_seed
        self._streams.clear()
