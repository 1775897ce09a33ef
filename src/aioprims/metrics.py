"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Counter sinks for cache and batch instrumentation.

The cache wrapper emits ``cache_hits``, ``cache_misses``, ``cache_coalesced``
and ``cache_failures`` tagged with the wrapped function name. The batch
executor emits untagged ``batch_windows``, ``batch_resolved`` and
``batch_rejected``.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from typing import Any, Protocol

COUNTER_HELP: dict[str, str] = {
    "cache_hits": "Memoized calls answered from a fresh entry",
    "cache_misses": "Memoized calls that invoked the wrapped function",
    "cache_coalesced": "Memoized calls that joined an in-flight computation",
    "cache_failures": "Wrapped function calls that raised; nothing was stored",
    "batch_windows": "Batch windows awaited to completion",
    "batch_resolved": "Batch operations that settled with a value",
    "batch_rejected": "Batch operations that settled with an exception",
}

Tags = Mapping[str, str]


class PrimsMetrics(Protocol):
    """Anything with an `incr` counter method can receive aioprims metrics."""

    def incr(self, name: str, value: int = 1, *, tags: Tags | None = None) -> None: ...


class NoOpPrimsMetrics:
    """Discards every counter; used when no sink is configured."""

    def incr(self, name: str, value: int = 1, *, tags: Tags | None = None) -> None:
        return None


class InMemoryPrimsMetrics:
    """
    Process-local counter totals, keyed by metric name and tag set.

    Handy for tests and ad-hoc inspection::

        metrics = InMemoryPrimsMetrics()
        cached = memoize(fetch, metrics=metrics)
        ...
        metrics.total("cache_hits")
    """

    def __init__(self) -> None:
        self._totals: Counter[tuple[str, tuple[tuple[str, str], ...]]] = Counter()

    def incr(self, name: str, value: int = 1, *, tags: Tags | None = None) -> None:
        self._totals[(name, tuple(sorted((tags or {}).items())))] += value

    def total(self, name: str, *, tags: Tags | None = None) -> int:
        """Sum for `name`, across all tag sets unless `tags` narrows it."""
        wanted = tuple(sorted(tags.items())) if tags is not None else None
        return sum(
            count
            for (metric, labels), count in self._totals.items()
            if metric == name and (wanted is None or labels == wanted)
        )

    def snapshot(self) -> dict[str, int]:
        """Totals per metric name with tags folded together."""
        out: dict[str, int] = {}
        for (metric, _), count in self._totals.items():
            out[metric] = out.get(metric, 0) + count
        return out


class PrometheusPrimsMetrics:
    """
    Publishes counters through `prometheus_client`.

    Install with ``pip install aioprims[metrics]``. One ``Counter`` is
    registered per metric name on first use; its label names come from the
    tags of that first call, so a given metric must always be emitted with
    the same tag keys. Pass a dedicated `registry` to keep tests isolated.
    """

    def __init__(self, *, namespace: str = "aioprims", registry: Any = None) -> None:
        try:
            import prometheus_client
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusPrimsMetrics needs the `prometheus_client` package."
            ) from exc

        self._client = prometheus_client
        self._namespace = namespace
        self._registry = registry if registry is not None else prometheus_client.REGISTRY
        self._families: dict[str, Any] = {}

    def _family(self, name: str, label_names: tuple[str, ...]) -> Any:
        family = self._families.get(name)
        if family is None:
            family = self._client.Counter(
                name,
                COUNTER_HELP.get(name, f"aioprims counter {name}"),
                labelnames=label_names,
                namespace=self._namespace,
                registry=self._registry,
            )
            self._families[name] = family
        return family

    def incr(self, name: str, value: int = 1, *, tags: Tags | None = None) -> None:
        if value <= 0:
            # Zero totals from empty batches; prometheus rejects negatives.
            return
        labels = dict(tags or {})
        family = self._family(name, tuple(sorted(labels)))
        if labels:
            family.labels(**labels).inc(value)
        else:
            family.inc(value)
