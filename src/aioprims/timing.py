"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Minute-based timing helpers shared by cache TTLs and callers.
"""

from __future__ import annotations

import asyncio
import math

SECONDS_PER_MINUTE = 60.0


def minutes_to_seconds(minutes: float) -> float:
    """Convert a minute duration into seconds."""
    if isinstance(minutes, bool) or not isinstance(minutes, (int, float)):
        raise TypeError(f"minutes must be a number, got {type(minutes).__name__}")
    if math.isnan(minutes):
        raise ValueError("minutes must not be NaN")
    return float(minutes) * SECONDS_PER_MINUTE


async def sleep_minutes(minutes: float) -> None:
    """
    Suspend the current task for `minutes` minutes.

    Fractional values are allowed: ``await sleep_minutes(0.1)`` waits six
    seconds.
    """
    seconds = minutes_to_seconds(minutes)
    if seconds < 0:
        raise ValueError("minutes must be >= 0")
    await asyncio.sleep(seconds)
