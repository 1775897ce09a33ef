from __future__ import annotations

import asyncio

import pytest

from aioprims import minutes_to_seconds, sleep_minutes


def test_minutes_to_seconds():
    assert minutes_to_seconds(1) == 60.0
    assert minutes_to_seconds(0.1) == pytest.approx(6.0)


@pytest.mark.parametrize("value", ["1", None, True])
def test_minutes_to_seconds_rejects_non_numbers(value):
    with pytest.raises(TypeError):
        minutes_to_seconds(value)


def test_sleep_minutes_delegates_to_asyncio_sleep(monkeypatch: pytest.MonkeyPatch):
    slept: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        slept.append(seconds)

    monkeypatch.setattr("aioprims.timing.asyncio.sleep", fake_sleep)
    asyncio.run(sleep_minutes(0.5))
    assert slept == [30.0]


def test_sleep_minutes_rejects_negative_durations():
    with pytest.raises(ValueError):
        asyncio.run(sleep_minutes(-1))
