"""Process-wide TTL cache for carrier responses.

Entries are keyed by request fingerprint and hold either a carrier
result or the CarrierError the carrier produced for that request. A
cached failure is replayed to later callers instead of calling the
carrier again until the entry expires.

The carrier call runs outside the lock, so two simultaneous misses for
the same key may both reach the carrier. The lock only protects the
entry table.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

from shiprate.errors.domain import CarrierError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


@dataclass(frozen=True)
class Hit:
    value: Any


@dataclass(frozen=True)
class CachedFailure:
    error: CarrierError


@dataclass(frozen=True)
class Miss:
    pass


MISS = Miss()

CacheLookup = Hit | CachedFailure | Miss


@dataclass
class _Entry:
    outcome: Hit | CachedFailure
    expires_at: float


class RateCache:
    """Fingerprint-keyed cache holding results and carrier failures.

    Args:
        ttl_seconds: Lifetime of every entry.
        clock: Monotonic time source, replaceable in tests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}
        self._next_sweep = clock() + ttl_seconds

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for entry in self._entries.values() if entry.expires_at > now)

    def lookup(self, key: str) -> CacheLookup:
        """Return the live outcome stored at key, or MISS."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return MISS
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return MISS
            return entry.outcome

    def store(self, key: str, value: Any) -> None:
        self._put(key, Hit(value))

    def store_failure(self, key: str, error: CarrierError) -> None:
        self._put(key, CachedFailure(error))

    def _put(self, key: str, outcome: Hit | CachedFailure) -> None:
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._sweep(now)
            self._entries[key] = _Entry(outcome=outcome, expires_at=now + self.ttl_seconds)

    def _sweep(self, now: float) -> None:
        """Drop every expired entry. Caller holds the lock."""
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        self._next_sweep = now + self.ttl_seconds
        if expired:
            logger.debug("rate_cache_sweep removed=%d remaining=%d", len(expired), len(self._entries))

    def stored_count(self) -> int:
        """Number of entries held, expired or not."""
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._next_sweep = self._clock() + self.ttl_seconds

    def fetch(self, key: str, compute_fn: Callable[[], Any]) -> Hit | CachedFailure:
        """Return the stored outcome for key, computing it on a miss.

        Args:
            key: Request fingerprint.
            compute_fn: Zero-argument callable performing the carrier call.

        Returns:
            Hit with the cached value, or CachedFailure with the error an
            earlier identical request produced.

        Raises:
            CarrierError: Raised by compute_fn on this miss; a copy is
                stored at key before the error is re-raised.
        """
        outcome = self.lookup(key)
        if isinstance(outcome, Hit):
            logger.debug("rate_cache_hit key=%s", key)
            return outcome
        if isinstance(outcome, CachedFailure):
            logger.info("rate_cache_cached_error key=%s code=%s", key, outcome.error.code)
            return outcome

        logger.debug("rate_cache_miss key=%s", key)
        try:
            value = compute_fn()
        except CarrierError as e:
            self.store_failure(key, replace(e))
            raise
        self.store(key, value)
        return Hit(value)

    def get_or_compute(self, key: str, compute_fn: Callable[[], Any]) -> Any:
        """Like fetch, but replays a cached failure by raising it.

        Returns:
            The cached or freshly computed value (an empty result is a
            value like any other).

        Raises:
            CarrierError: A fresh copy of the cached failure, chained from
                the stored error, or the error raised by compute_fn.
        """
        outcome = self.fetch(key, compute_fn)
        if isinstance(outcome, CachedFailure):
            # The stored instance is shared, so it is never raised again.
            raise replace(outcome.error) from outcome.error
        return outcome.value


_default_lock = threading.Lock()
_default_cache: RateCache | None = None


def get_rate_cache(ttl_seconds: float = DEFAULT_TTL_SECONDS) -> RateCache:
    """Return the process-wide cache, creating it on first use.

    The TTL only applies when the cache is first created.
    """
    global _default_cache
    with _default_lock:
        if _default_cache is None:
            _default_cache = RateCache(ttl_seconds=ttl_seconds)
        return _default_cache


def reset_rate_cache() -> None:
    """Drop the process-wide cache. Used by tests."""
    global _default_cache
    with _default_lock:
        _default_cache = None
