"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: batch/__init__.py.
"""

from .executor import run_batched, run_batched_sync
from .types import BatchResult, Operation, OperationFactory

__all__ = [
    "BatchResult",
    "Operation",
    "OperationFactory",
    "run_batched",
    "run_batched_sync",
]
