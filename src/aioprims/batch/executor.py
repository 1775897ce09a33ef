"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Chunked settle-all execution for pending operations.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterable
from typing import Any

from ..errors import BatchConfigError
from ..metrics import NoOpPrimsMetrics, PrimsMetrics
from .types import BatchResult, Operation

logger = logging.getLogger("aioprims.batch")


def _validate_chunk_size(chunk_size: int) -> int:
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
        raise BatchConfigError(
            f"chunk_size must be a non-negative integer, got {type(chunk_size).__name__}"
        )
    if chunk_size < 0:
        raise BatchConfigError(f"chunk_size must be >= 0, got {chunk_size}")
    return chunk_size


def _close_unstarted(items: Iterable[Operation]) -> None:
    for item in items:
        if inspect.iscoroutine(item):
            item.close()


def _collect(items: Iterable[Any]) -> list[Operation]:
    rows = list(items)
    for index, item in enumerate(rows):
        if inspect.isawaitable(item) or callable(item):
            continue
        _close_unstarted(rows)
        raise BatchConfigError(
            f"operation #{index} must be awaitable or a zero-argument callable, "
            f"got {type(item).__name__}"
        )
    return rows


def _windows(rows: list[Operation], chunk_size: int) -> list[list[Operation]]:
    if not rows:
        return []
    if chunk_size == 0 or chunk_size >= len(rows):
        return [rows]
    return [rows[i : i + chunk_size] for i in range(0, len(rows), chunk_size)]


async def _settle(operation: Operation) -> Any:
    # Factories start only here, when their window begins.
    if not inspect.isawaitable(operation):
        operation = operation()
        if not inspect.isawaitable(operation):
            return operation
    return await operation


async def run_batched(
    operations: Iterable[Operation],
    chunk_size: int = 0,
    *,
    metrics: PrimsMetrics | None = None,
) -> BatchResult:
    """
    Settle every operation in sequential windows and split the outcomes.

    `operations` may hold zero-argument factories returning awaitables, which
    are only called when their window begins and therefore get real bounded
    concurrency, or already-constructed awaitables, whose work may have
    started before this call so windowing only orders when they are awaited.

    A `chunk_size` of 0 (or at least the number of operations) settles
    everything in one window. Otherwise windows of at most `chunk_size`
    operations are awaited one after another, each window fully settled
    before the next begins. Outcomes are appended window by window, in input
    order within a window.

    Individual failures never propagate: they are collected into
    ``BatchResult.rejected``. Cancelling the caller cancels the current window
    and closes coroutines of windows that never started.

    Example::

        async def fetch(ms: int, ok: bool) -> str:
            await asyncio.sleep(ms / 1000)
            if not ok:
                raise RuntimeError(f"Rejected after {ms}ms")
            return f"Resolved after {ms}ms"

        result = await run_batched(
            [lambda: fetch(1000, True), lambda: fetch(2000, False)],
            chunk_size=1,
        )
    """
    size = _validate_chunk_size(chunk_size)
    rows = _collect(operations)
    sink: PrimsMetrics = metrics or NoOpPrimsMetrics()
    result = BatchResult()

    windows = _windows(rows, size)
    next_window = 0
    try:
        for next_window, window in enumerate(windows, start=1):
            logger.debug(
                "awaiting batch window %d/%d with %d operations",
                next_window,
                len(windows),
                len(window),
            )
            outcomes = await asyncio.gather(
                *(_settle(operation) for operation in window),
                return_exceptions=True,
            )
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    result.rejected.append(outcome)
                else:
                    result.resolved.append(outcome)
            sink.incr("batch_windows")
    finally:
        for window in windows[next_window:]:
            _close_unstarted(window)

    sink.incr("batch_resolved", len(result.resolved))
    sink.incr("batch_rejected", len(result.rejected))
    logger.debug(
        "batch settled: %d resolved, %d rejected across %d windows",
        len(result.resolved),
        len(result.rejected),
        len(windows),
    )
    return result


def run_batched_sync(
    operations: Iterable[Operation],
    chunk_size: int = 0,
    *,
    metrics: PrimsMetrics | None = None,
) -> BatchResult:
    """
    Sync wrapper for `run_batched` using a dedicated event loop.

    Pass factories or coroutines; futures bound to another loop cannot be
    awaited here.
    """

    return asyncio.run(run_batched(operations, chunk_size, metrics=metrics))
