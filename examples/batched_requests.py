"""
batched_requests.py: Settle operations two at a time.

Four simulated requests finish after 1000/2000/1500/3000 ms; the second and
fourth fail. Factories are used so each window starts its own work.

Usage:
    python examples/batched_requests.py
"""

import asyncio

from aioprims import run_batched


async def simulated_request(ms: int, will_resolve: bool) -> str:
    await asyncio.sleep(ms / 1000)
    if not will_resolve:
        raise RuntimeError(f"Rejected after {ms}ms")
    return f"Resolved after {ms}ms"


async def main() -> None:
    plan = [(1000, True), (2000, False), (1500, True), (3000, False)]
    result = await run_batched(
        [lambda ms=ms, ok=ok: simulated_request(ms, ok) for ms, ok in plan],
        chunk_size=2,
    )
    print("resolved:", result.resolved)
    print("rejected:", [str(error) for error in result.rejected])


if __name__ == "__main__":
    asyncio.run(main())
