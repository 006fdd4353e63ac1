"""Deterministic deep hashing of nested objects."""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Mapping

_FNV32_OFFSET = 2166136261
_FNV32_PRIME = 16777619
_SAFE_ALPHANUMS = "bcdfghjklmnpqrstvwxz2456789"


def _dump(obj: Any, seen: set[int]) -> str:
    if obj is None:
        return "<nil>"
    if isinstance(obj, Enum):
        return f"({type(obj).__name__}){_dump(obj.value, seen)}"
    if isinstance(obj, bool):
        return f"(bool){'true' if obj else 'false'}"
    if isinstance(obj, int):
        return f"(int){obj}"
    if isinstance(obj, float):
        return f"(float){obj!r}"
    if isinstance(obj, str):
        return f"(str){json.dumps(obj)}"
    if isinstance(obj, (bytes, bytearray)):
        return f"(bytes){bytes(obj).hex()}"
    if isinstance(obj, (datetime, date, time)):
        return f"({type(obj).__name__}){obj.isoformat()}"
    if isinstance(obj, timedelta):
        return f"(timedelta){obj.total_seconds()!r}"

    if id(obj) in seen:
        return f"({type(obj).__name__})<already shown>"
    seen.add(id(obj))
    try:
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            fields = " ".join(
                f"{f.name}:{_dump(getattr(obj, f.name), seen)}"
                for f in dataclasses.fields(obj)
            )
            return f"({type(obj).__name__}){{{fields}}}"
        if isinstance(obj, Mapping):
            items = sorted(
                (_dump(k, seen), _dump(v, seen)) for k, v in obj.items()
            )
            body = " ".join(f"{k}:{v}" for k, v in items)
            return f"(map){{{body}}}"
        if isinstance(obj, (list, tuple)):
            body = " ".join(_dump(item, seen) for item in obj)
            return f"({type(obj).__name__})[{body}]"
        if isinstance(obj, (set, frozenset)):
            body = " ".join(sorted(_dump(item, seen) for item in obj))
            return f"(set)[{body}]"
        if hasattr(obj, "__dict__"):
            fields = " ".join(f"{k}:{_dump(v, seen)}" for k, v in vars(obj).items())
            return f"({type(obj).__name__}){{{fields}}}"
    finally:
        seen.discard(id(obj))

    raise TypeError(f"cannot dump object of type {type(obj).__name__}")


def deep_dump(obj: Any) -> str:
    """Render ``obj`` and everything it contains as a stable text.

    Mapping keys and set members are sorted, so equal values give equal text.
    """
    return _dump(obj, set())


def fnv32a(data: bytes) -> int:
    """Return the 32-bit FNV-1a hash of ``data``."""
    value = _FNV32_OFFSET
    for byte in data:
        value ^= byte
        value = (value * _FNV32_PRIME) & 0xFFFFFFFF
    return value


def safe_encode_string(value: str) -> str:
    """Map each character onto an alphabet without vowels and look-alike digits."""
    return "".join(_SAFE_ALPHANUMS[ord(ch) % len(_SAFE_ALPHANUMS)] for ch in value)


def deep_hash_object(obj: Any) -> int:
    """Return the FNV-1a hash of the deep dump of ``obj``."""
    return fnv32a(deep_dump(obj).encode("utf-8"))


def fnv_hash_string_objects(*args: Any) -> str:
    """Hash the given objects into a safe-encoded string.

    The hasher is reset for every object, so only the last one decides the result.
    """
    value = _FNV32_OFFSET
    for obj in args:
        value = deep_hash_object(obj)
    return safe_encode_string(str(value))


def compute_hash(template: Any) -> str:
    """Return the safe-encoded template hash of ``template``."""
    return safe_encode_string(str(deep_hash_object(template)))