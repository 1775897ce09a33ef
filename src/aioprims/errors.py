"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error types raised by aioprims primitives.
"""

from __future__ import annotations


class AioPrimsError(RuntimeError):
    """Base error for aioprims configuration and keying failures."""


class CacheConfigError(AioPrimsError, ValueError):
    """Raised when memoization options (for example TTL) are invalid."""


class CacheKeyError(AioPrimsError, TypeError):
    """Raised when call arguments cannot be serialized into a cache key."""


class BatchConfigError(AioPrimsError, ValueError):
    """Raised when batch execution input or chunk size is invalid."""
