"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Time-bounded memoization for sync and async callables.
"""

from __future__ import annotations

import functools
import inspect
import logging
import time
from collections.abc import Callable
from typing import Any

from ..errors import CacheConfigError
from ..metrics import NoOpPrimsMetrics, PrimsMetrics
from ..timing import minutes_to_seconds
from .coalescing import InflightCoalescer
from .keys import derive_cache_key
from .types import CacheEntry, CacheInfo

logger = logging.getLogger("aioprims.cache")

Clock = Callable[[], float]


def _validate_ttl(ttl_minutes: float | None) -> float | None:
    if ttl_minutes is None:
        return None
    try:
        ttl_s = minutes_to_seconds(ttl_minutes)
    except (TypeError, ValueError) as exc:
        raise CacheConfigError(f"ttl_minutes must be a positive number: {exc}") from exc
    if ttl_s <= 0:
        raise CacheConfigError(f"ttl_minutes must be > 0, got {ttl_minutes!r}")
    return ttl_s


class MemoizedFunction:
    """
    Async drop-in replacement for a memoized callable.

    Calling the instance derives a key from the arguments, returns the stored
    value while it is fresh, and otherwise calls the wrapped function,
    awaiting its result when it is awaitable. Failures propagate and are never
    stored. Staleness is checked lazily on lookup; there is no background
    sweep.

    With ``coalesce=False`` concurrent calls for the same key each invoke the
    wrapped function and the last one to finish wins the slot. With
    ``coalesce=True`` later callers await the first caller's in-flight
    computation instead.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        *,
        ttl_minutes: float | None = None,
        coalesce: bool = False,
        clock: Clock | None = None,
        metrics: PrimsMetrics | None = None,
    ) -> None:
        if not callable(func):
            raise CacheConfigError(f"memoize expects a callable, got {type(func).__name__}")
        functools.update_wrapper(self, func)
        self._func = func
        self._ttl_minutes = ttl_minutes
        self._ttl_s = _validate_ttl(ttl_minutes)
        self._clock: Clock = clock or time.monotonic
        self._metrics: PrimsMetrics = metrics or NoOpPrimsMetrics()
        self._coalescer = InflightCoalescer() if coalesce else None
        self._entries: dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._coalesced = 0
        self._tags = {"function": getattr(func, "__qualname__", type(func).__name__)}

    @property
    def ttl_minutes(self) -> float | None:
        return self._ttl_minutes

    @property
    def coalesce(self) -> bool:
        return self._coalescer is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"<MemoizedFunction {self._tags['function']} "
            f"ttl_minutes={self._ttl_minutes!r} size={len(self._entries)}>"
        )

    def _fresh_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock(), self._ttl_s):
            logger.debug("cache entry expired for %s", self._tags["function"])
            return None
        return entry

    async def __call__(self, *args: Any, **kwargs: Any) -> Any:
        key = derive_cache_key(args, kwargs)
        entry = self._fresh_entry(key)
        if entry is not None:
            self._hits += 1
            self._metrics.incr("cache_hits", tags=self._tags)
            logger.debug("cache hit for %s", self._tags["function"])
            return entry.value

        if self._coalescer is not None and self._coalescer.is_inflight(key):
            self._coalesced += 1
            self._metrics.incr("cache_coalesced", tags=self._tags)
            logger.debug("joining in-flight call for %s", self._tags["function"])
        else:
            self._misses += 1
            self._metrics.incr("cache_misses", tags=self._tags)
        if self._coalescer is None:
            return await self._compute(key, args, kwargs)

        result, _ = await self._coalescer.run(
            key, lambda: self._compute(key, args, kwargs)
        )
        return result

    async def _compute(self, key: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        logger.debug("cache miss for %s, invoking", self._tags["function"])
        try:
            result = self._func(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            self._metrics.incr("cache_failures", tags=self._tags)
            logger.debug("call failed for %s, nothing cached", self._tags["function"])
            raise
        self._entries[key] = CacheEntry(timestamp=self._clock(), value=result)
        return result

    def contains(self, *args: Any, **kwargs: Any) -> bool:
        """Whether a fresh entry exists for these arguments, without computing."""
        return self._fresh_entry(derive_cache_key(args, kwargs)) is not None

    def delete(self, *args: Any, **kwargs: Any) -> None:
        """Remove the entry for these arguments; missing keys are ignored."""
        self._entries.pop(derive_cache_key(args, kwargs), None)

    def clear(self) -> None:
        """Remove every entry. In-flight computations still store on completion."""
        self._entries.clear()

    def purge_expired(self) -> int:
        """Drop stale entries now and return how many were removed."""
        if self._ttl_s is None:
            return 0
        now = self._clock()
        stale = [key for key, entry in self._entries.items() if entry.is_expired(now, self._ttl_s)]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("purged %d expired entries for %s", len(stale), self._tags["function"])
        return len(stale)

    def cache_info(self) -> CacheInfo:
        return CacheInfo(
            hits=self._hits,
            misses=self._misses,
            coalesced=self._coalesced,
            size=len(self._entries),
            inflight=len(self._coalescer) if self._coalescer is not None else 0,
            ttl_minutes=self._ttl_minutes,
        )


def memoize(
    func: Callable[..., Any] | None = None,
    ttl_minutes: float | None = None,
    *,
    coalesce: bool = False,
    clock: Clock | None = None,
    metrics: PrimsMetrics | None = None,
):
    """
    Memoize `func` with an optional TTL in minutes.

    Works as a call (``memoize(fetch, 5)``) or a decorator (``@memoize`` /
    ``@memoize(ttl_minutes=5)``). The returned `MemoizedFunction` is always
    awaited, whether `func` is sync or async, and exposes `delete`, `clear`,
    `purge_expired` and `cache_info`.

    Example::

        async def fetch_json(url: str) -> dict:
            ...

        cached_fetch = memoize(fetch_json, ttl_minutes=5)
        data = await cached_fetch("https://api.example.com/data")
        cached_fetch.delete("https://api.example.com/data")
        cached_fetch.clear()
    """

    def decorate(target: Callable[..., Any]) -> MemoizedFunction:
        return MemoizedFunction(
            target,
            ttl_minutes=ttl_minutes,
            coalesce=coalesce,
            clock=clock,
            metrics=metrics,
        )

    if func is None:
        return decorate
    return decorate(func)
