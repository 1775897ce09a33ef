"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/coalescing.py.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any


class InflightCoalescer:
    """Share one in-flight computation between concurrent callers per key."""

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[Any]] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def is_inflight(self, key: str) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    async def run(self, key: str, factory: Callable[[], Coroutine[Any, Any, Any]]) -> tuple[Any, bool]:
        """
        Await the in-flight task for `key`, starting it with `factory` if absent.

        Returns ``(result, joined)`` where `joined` is True when this caller
        attached to a task started by another caller. The shared task is
        shielded so cancelling one waiter does not cancel the others.
        """
        existing = self._tasks.get(key)
        if existing is not None and not existing.done():
            return await asyncio.shield(existing), True

        task: asyncio.Task[Any] = asyncio.create_task(factory())
        self._tasks[key] = task
        task.add_done_callback(lambda done: self._release(key, done))
        return await asyncio.shield(task), False

    def _release(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        if not task.cancelled():
            # Mark the exception retrieved; every waiter re-raises it.
            task.exception()
