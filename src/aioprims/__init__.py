"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Async primitives: time-bounded memoization and chunked settle-all batches.

Quick start::

    from aioprims import memoize, run_batched

    cached_fetch = memoize(fetch_json, ttl_minutes=5)
    data = await cached_fetch("https://api.example.com/data")

    result = await run_batched(
        [lambda url=url: cached_fetch(url) for url in urls],
        chunk_size=4,
    )
    print(result.resolved, result.rejected)
"""

from .batch import BatchResult, Operation, OperationFactory, run_batched, run_batched_sync
from .cache import (
    GENERIC_CACHE_KEY,
    CacheEntry,
    CacheInfo,
    MemoizedFunction,
    derive_cache_key,
    memoize,
)
from .errors import AioPrimsError, BatchConfigError, CacheConfigError, CacheKeyError
from .metrics import InMemoryPrimsMetrics, NoOpPrimsMetrics, PrimsMetrics, PrometheusPrimsMetrics
from .settings import PrimsSettings
from .timing import minutes_to_seconds, sleep_minutes

__all__ = [
    "memoize",
    "MemoizedFunction",
    "CacheEntry",
    "CacheInfo",
    "GENERIC_CACHE_KEY",
    "derive_cache_key",
    "run_batched",
    "run_batched_sync",
    "BatchResult",
    "Operation",
    "OperationFactory",
    "AioPrimsError",
    "CacheConfigError",
    "CacheKeyError",
    "BatchConfigError",
    "PrimsMetrics",
    "NoOpPrimsMetrics",
    "InMemoryPrimsMetrics",
    "PrometheusPrimsMetrics",
    "PrimsSettings",
    "sleep_minutes",
    "minutes_to_seconds",
]
