"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Default cache and batch settings with explicit environment loading.
"""

from __future__ import annotations

import math
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .batch import BatchResult, Operation, run_batched
from .cache import MemoizedFunction, memoize
from .errors import BatchConfigError, CacheConfigError
from .metrics import PrimsMetrics

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _env_ttl(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise CacheConfigError(f"AIOPRIMS_DEFAULT_TTL_MINUTES is not a number: {raw!r}") from exc
    if math.isnan(value) or value <= 0:
        raise CacheConfigError("AIOPRIMS_DEFAULT_TTL_MINUTES must be a positive number")
    return value


def _env_chunk_size(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return 0
    try:
        value = int(raw)
    except ValueError as exc:
        raise BatchConfigError(f"AIOPRIMS_DEFAULT_CHUNK_SIZE is not an integer: {raw!r}") from exc
    if value < 0:
        raise BatchConfigError("AIOPRIMS_DEFAULT_CHUNK_SIZE must be >= 0")
    return value


def _env_flag(name: str, raw: str | None) -> bool:
    normalized = (raw or "").strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise CacheConfigError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True, slots=True)
class PrimsSettings:
    """Explicit defaults for memoization and batch execution."""

    default_ttl_minutes: float | None = None
    default_chunk_size: int = 0
    coalesce: bool = False

    @staticmethod
    def from_env() -> "PrimsSettings":
        """Load settings from environment variables."""
        return PrimsSettings(
            default_ttl_minutes=_env_ttl(os.getenv("AIOPRIMS_DEFAULT_TTL_MINUTES")),
            default_chunk_size=_env_chunk_size(os.getenv("AIOPRIMS_DEFAULT_CHUNK_SIZE")),
            coalesce=_env_flag("AIOPRIMS_COALESCE", os.getenv("AIOPRIMS_COALESCE")),
        )

    def memoize(
        self,
        func: Callable[..., Any],
        *,
        metrics: PrimsMetrics | None = None,
    ) -> MemoizedFunction:
        """Memoize `func` with these defaults."""
        return memoize(
            func,
            self.default_ttl_minutes,
            coalesce=self.coalesce,
            metrics=metrics,
        )

    async def run_batched(
        self,
        operations: Iterable[Operation],
        *,
        metrics: PrimsMetrics | None = None,
    ) -> BatchResult:
        """Run `operations` with the default chunk size."""
        return await run_batched(operations, self.default_chunk_size, metrics=metrics)
