"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Canonical cache-key derivation for call arguments.

Arguments are first normalized into plain JSON values, then dumped as
compact JSON with sorted object keys, so structurally equal arguments map
to the same key regardless of identity, dict ordering or set iteration
order.

Only ``str``, ``int``, ``float``, ``bool`` and ``None`` (exact types), lists,
tuples and str-keyed dicts encode as themselves. Every other value is wrapped
in a ``{"__type__": <qualified type name>, "value": ...}`` envelope so it
cannot share a slot with a string of the same text: sets (sorted), bytes
(hex), dataclasses and pydantic models (field by field), and anything
``pydantic_core.to_jsonable_python`` understands (enums, UUIDs, datetimes,
decimals, paths). Dicts with non-string keys, or with a ``"__type__"`` key,
are encoded as a tagged list of sorted ``[key, value]`` pairs.

Values nothing can represent, and cyclic structures, raise
``CacheKeyError`` instead of falling back to identity keying. Tuples and
lists encode identically.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError, to_jsonable_python

from ..errors import CacheKeyError

GENERIC_CACHE_KEY = "genericKey"

_TYPE_TAG = "__type__"
_NATIVE = (str, int, float, bool, type(None))


def _type_name(value: Any) -> str:
    kind = type(value)
    return f"{kind.__module__}.{kind.__qualname__}"


def _tagged(value: Any, payload: Any) -> dict[str, Any]:
    return {_TYPE_TAG: _type_name(value), "value": payload}


def _dump(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def _normalize(value: Any, path: set[int]) -> Any:
    if type(value) in _NATIVE:
        return value

    marker = id(value)
    if marker in path:
        raise CacheKeyError("Cannot derive cache key from a cyclic structure")
    path.add(marker)
    try:
        return _normalize_container(value, path)
    finally:
        path.discard(marker)


def _normalize_container(value: Any, path: set[int]) -> Any:
    if isinstance(value, (list, tuple)):
        return [_normalize(item, path) for item in value]

    if isinstance(value, Mapping):
        if all(type(key) is str for key in value) and _TYPE_TAG not in value:
            return {key: _normalize(item, path) for key, item in value.items()}
        pairs = [[_normalize(key, path), _normalize(item, path)] for key, item in value.items()]
        pairs.sort(key=lambda pair: _dump(pair[0]))
        return _tagged(value, pairs)

    if isinstance(value, (set, frozenset)):
        # Set iteration order is not stable between equal sets.
        items = [_normalize(item, path) for item in value]
        return _tagged(value, sorted(items, key=_dump))

    if isinstance(value, (bytes, bytearray, memoryview)):
        return _tagged(value, bytes(value).hex())

    if isinstance(value, BaseModel):
        fields = {name: getattr(value, name) for name in type(value).model_fields}
        fields.update(value.model_extra or {})
        return _tagged(value, _normalize(fields, path))

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}
        return _tagged(value, _normalize(fields, path))

    try:
        plain = to_jsonable_python(value)
    except PydanticSerializationError as exc:
        raise CacheKeyError(
            f"Cannot derive cache key from value of type {type(value).__name__}"
        ) from exc
    return _tagged(value, _normalize(plain, path))


def derive_cache_key(args: tuple[Any, ...], kwargs: Mapping[str, Any] | None = None) -> str:
    """
    Build the cache key for one call.

    Zero-argument calls share `GENERIC_CACHE_KEY`. Keyword arguments are
    part of the key and are order-insensitive.
    """
    if not args and not kwargs:
        return GENERIC_CACHE_KEY
    payload: list[Any] = [list(args)]
    if kwargs:
        payload.append(dict(kwargs))
    try:
        return _dump(_normalize(payload, set()))
    except RecursionError as exc:
        raise CacheKeyError(f"Cannot derive cache key: {exc}") from exc
