"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: batch/types.py.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

OperationFactory: TypeAlias = Callable[[], Awaitable[Any]]
Operation: TypeAlias = Awaitable[Any] | OperationFactory


@dataclass(slots=True)
class BatchResult:
    """
    Settled outcomes of one batch run.

    Attributes:
        resolved: Values of operations that completed, window by window.
        rejected: Exceptions of operations that failed, window by window.

    Positions are not correlated with the input sequence.
    """

    resolved: list[Any] = field(default_factory=list)
    rejected: list[BaseException] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.resolved) + len(self.rejected)

    @property
    def ok(self) -> bool:
        """Whether no operation was rejected."""
        return not self.rejected
