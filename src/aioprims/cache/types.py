"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/types.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One memoized result with its creation instant."""

    timestamp: float
    value: Any

    def age_s(self, now: float) -> float:
        """Seconds elapsed between creation and `now`."""
        return now - self.timestamp

    def is_expired(self, now: float, ttl_s: float | None) -> bool:
        """Whether this entry is stale for `ttl_s`; `None` never expires."""
        if ttl_s is None:
            return False
        return self.age_s(now) > ttl_s


@dataclass(frozen=True, slots=True)
class CacheInfo:
    """Point-in-time counters for one memoized function."""

    hits: int
    misses: int
    coalesced: int
    size: int
    inflight: int
    ttl_minutes: float | None
