#!/usr/bin/env python3
"""
Batch executor benchmark comparing deferred factories with eager awaitables.

Usage examples:
  PYTHONPATH=src python scripts/batch_benchmark.py --chunk-size 8
  PYTHONPATH=src python scripts/batch_benchmark.py --mode eager --num-ops 500 --failure-rate 0.2
"""

from __future__ import annotations

import argparse
import asyncio
import random
import statistics
import time

from aioprims import run_batched


async def run_benchmark(
    *,
    mode: str,
    num_ops: int,
    chunk_size: int,
    latency_ms: float,
    failure_rate: float,
    seed: int,
) -> None:
    rng = random.Random(seed)
    latencies: list[float] = []
    active = 0
    peak_active = 0

    async def operation(index: int, fail: bool) -> int:
        nonlocal active, peak_active
        active += 1
        peak_active = max(peak_active, active)
        started = time.perf_counter()
        try:
            await asyncio.sleep(latency_ms / 1000.0 * rng.uniform(0.5, 1.5))
            if fail:
                raise RuntimeError(f"operation {index} failed")
            return index
        finally:
            latencies.append(time.perf_counter() - started)
            active -= 1

    plan = [(i, rng.random() < failure_rate) for i in range(num_ops)]
    if mode == "deferred":
        operations = [lambda i=i, fail=fail: operation(i, fail) for i, fail in plan]
    elif mode == "eager":
        operations = [asyncio.ensure_future(operation(i, fail)) for i, fail in plan]
    else:
        raise ValueError(f"Unsupported mode: {mode}")

    started = time.perf_counter()
    result = await run_batched(operations, chunk_size)
    elapsed = time.perf_counter() - started

    p50 = statistics.median(latencies) if latencies else 0.0
    print(f"mode={mode}")
    print(f"operations={num_ops}")
    print(f"chunk_size={chunk_size}")
    print(f"resolved={len(result.resolved)}")
    print(f"rejected={len(result.rejected)}")
    print(f"peak_concurrency={peak_active}")
    print(f"elapsed_s={elapsed:.3f}")
    print(f"operation_p50_ms={p50 * 1000:.2f}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Batch executor benchmark utility")
    parser.add_argument("--mode", choices=("deferred", "eager"), default="deferred")
    parser.add_argument("--num-ops", type=int, default=200)
    parser.add_argument("--chunk-size", type=int, default=16)
    parser.add_argument("--latency-ms", type=float, default=10.0)
    parser.add_argument("--failure-rate", type=float, default=0.1)
    parser.add_argument("--seed", type=int, default=7)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    asyncio.run(
        run_benchmark(
            mode=args.mode,
            num_ops=args.num_ops,
            chunk_size=args.chunk_size,
            latency_ms=args.latency_ms,
            failure_rate=args.failure_rate,
            seed=args.seed,
        )
    )


if __name__ == "__main__":
    main()
