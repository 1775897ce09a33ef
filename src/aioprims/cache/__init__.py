"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .coalescing import InflightCoalescer
from .keys import GENERIC_CACHE_KEY, derive_cache_key
from .memoize import MemoizedFunction, memoize
from .types import CacheEntry, CacheInfo

__all__ = [
    "CacheEntry",
    "CacheInfo",
    "GENERIC_CACHE_KEY",
    "derive_cache_key",
    "InflightCoalescer",
    "MemoizedFunction",
    "memoize",
]
