"""
memoized_fetch.py: Memoize a slow lookup with a TTL.

Demonstrates cache hits, explicit deletion and full clearing.

Usage:
    python examples/memoized_fetch.py
"""

import asyncio

from aioprims import memoize

calls = 0


async def lookup_price(symbol: str) -> float:
    global calls
    calls += 1
    await asyncio.sleep(0.2)
    return {"ACME": 12.5, "INITECH": 3.75}.get(symbol, 0.0)


async def main() -> None:
    cached_price = memoize(lookup_price, ttl_minutes=5)

    print(await cached_price("ACME"))
    print(await cached_price("ACME"))
    print(f"underlying calls: {calls}")

    cached_price.delete("ACME")
    print(await cached_price("ACME"))
    cached_price.clear()
    print(cached_price.cache_info())


if __name__ == "__main__":
    asyncio.run(main())
