from __future__ import annotations

import asyncio
import time

import pytest

from aioprims import (
    BatchConfigError,
    BatchResult,
    InMemoryPrimsMetrics,
    run_batched,
    run_batched_sync,
)


def run_async(coro):
    return asyncio.run(coro)


async def _request(ms: int, will_resolve: bool) -> str:
    await asyncio.sleep(ms / 1000)
    if not will_resolve:
        raise RuntimeError(f"Rejected after {ms}ms")
    return f"Resolved after {ms}ms"


_PLAN = [(10, True), (20, False), (15, True), (30, False)]


def test_end_to_end_two_per_window():
    async def scenario() -> None:
        result = await run_batched(
            [lambda ms=ms, ok=ok: _request(ms, ok) for ms, ok in _PLAN],
            chunk_size=2,
        )
        assert result.resolved == ["Resolved after 10ms", "Resolved after 15ms"]
        assert [str(error) for error in result.rejected] == [
            "Rejected after 20ms",
            "Rejected after 30ms",
        ]

    run_async(scenario())


def test_end_to_end_single_window_with_started_operations():
    async def scenario() -> None:
        tasks = [asyncio.ensure_future(_request(ms, ok)) for ms, ok in _PLAN]
        result = await run_batched(tasks, 0)
        assert result.resolved == ["Resolved after 10ms", "Resolved after 15ms"]
        assert [str(error) for error in result.rejected] == [
            "Rejected after 20ms",
            "Rejected after 30ms",
        ]

    run_async(scenario())


@pytest.mark.parametrize("chunk_size", [0, 1, 5, 6])
def test_every_operation_is_accounted_for(chunk_size: int):
    async def scenario() -> None:
        outcomes = [True, False, False, True, False]
        operations = [_request(1, ok) for ok in outcomes]
        result = await run_batched(operations, chunk_size)
        assert result.total == len(outcomes)
        assert len(result.resolved) == 2
        assert len(result.rejected) == 3
        assert not result.ok

    run_async(scenario())


@pytest.mark.parametrize("chunk_size", [0, 1, 3])
def test_empty_input_returns_empty_result(chunk_size: int):
    result = run_async(run_batched([], chunk_size))
    assert result == BatchResult(resolved=[], rejected=[])
    assert result.ok


def test_windows_settle_before_next_window_starts():
    async def scenario() -> None:
        events: list[tuple[str, int, float]] = []

        async def tracked(index: int, ms: int) -> int:
            events.append(("start", index, time.monotonic()))
            await asyncio.sleep(ms / 1000)
            events.append(("end", index, time.monotonic()))
            return index

        durations = [30, 5, 10, 5, 20]
        result = await run_batched(
            [lambda i=i, ms=ms: tracked(i, ms) for i, ms in enumerate(durations)],
            chunk_size=2,
        )
        assert result.resolved == [0, 1, 2, 3, 4]

        starts = {index: at for kind, index, at in events if kind == "start"}
        ends = {index: at for kind, index, at in events if kind == "end"}
        windows = [[0, 1], [2, 3], [4]]
        for current, following in zip(windows, windows[1:]):
            assert max(ends[i] for i in current) <= min(starts[i] for i in following)

    run_async(scenario())


def test_chunk_size_one_is_strictly_sequential():
    async def scenario() -> None:
        active = 0
        peak = 0

        async def op(value: int) -> int:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.001)
            active -= 1
            return value

        result = await run_batched([lambda v=v: op(v) for v in range(4)], 1)
        assert result.resolved == [0, 1, 2, 3]
        assert peak == 1

    run_async(scenario())


def test_factories_bound_concurrency_per_window():
    async def scenario() -> None:
        active = 0
        peak = 0

        async def op() -> None:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.001)
            active -= 1

        result = await run_batched([op for _ in range(7)], chunk_size=3)
        assert result.total == 7
        assert peak == 3

    run_async(scenario())


def test_outcomes_follow_input_order_within_window():
    async def scenario() -> None:
        result = await run_batched(
            [lambda: _request(30, True), lambda: _request(1, True)],
            chunk_size=0,
        )
        assert result.resolved == ["Resolved after 30ms", "Resolved after 1ms"]

    run_async(scenario())


def test_factory_raising_synchronously_is_rejected():
    def broken():
        raise KeyError("missing")

    async def scenario() -> None:
        result = await run_batched([broken, lambda: _request(1, True)], chunk_size=1)
        assert result.resolved == ["Resolved after 1ms"]
        assert len(result.rejected) == 1
        assert isinstance(result.rejected[0], KeyError)

    run_async(scenario())


def test_sync_factory_value_is_resolved():
    result = run_async(run_batched([lambda: 5], 0))
    assert result.resolved == [5]


def test_mixed_factories_and_awaitables():
    async def scenario() -> None:
        result = await run_batched(
            [_request(1, True), lambda: _request(2, False), asyncio.ensure_future(_request(3, True))],
            chunk_size=2,
        )
        assert result.resolved == ["Resolved after 1ms", "Resolved after 3ms"]
        assert [str(error) for error in result.rejected] == ["Rejected after 2ms"]

    run_async(scenario())


@pytest.mark.parametrize("chunk_size", [-1, 1.5, "2", True, None])
def test_invalid_chunk_size_fails_fast(chunk_size):
    with pytest.raises(BatchConfigError):
        run_async(run_batched([], chunk_size))


def test_invalid_operation_fails_fast_and_closes_coroutines():
    async def scenario() -> None:
        pending = _request(1, True)
        with pytest.raises(BatchConfigError, match="operation #1"):
            await run_batched([pending, 42], 0)
        assert pending.cr_frame is None

    run_async(scenario())


def test_cancellation_propagates_and_closes_unstarted_windows():
    async def scenario() -> None:
        started = asyncio.Event()

        async def blocking() -> None:
            started.set()
            await asyncio.Event().wait()

        later = _request(1, True)
        runner = asyncio.create_task(run_batched([blocking(), later], chunk_size=1))
        await started.wait()
        runner.cancel()
        with pytest.raises(asyncio.CancelledError):
            await runner
        assert later.cr_frame is None

    run_async(scenario())


def test_sync_wrapper_runs_its_own_loop():
    result = run_batched_sync([lambda: _request(1, True), lambda: _request(1, False)], 1)
    assert result.resolved == ["Resolved after 1ms"]
    assert len(result.rejected) == 1


def test_metrics_count_windows_and_outcomes():
    metrics = InMemoryPrimsMetrics()
    run_async(
        run_batched(
            [lambda ms=ms, ok=ok: _request(ms, ok) for ms, ok in _PLAN],
            chunk_size=3,
            metrics=metrics,
        )
    )
    assert metrics.snapshot() == {"batch_windows": 2, "batch_resolved": 2, "batch_rejected": 2}
