"""
Value envelope for persisted key records.

Records are JSON documents. Binary payloads anywhere inside a value are
written as ``{"type": "Buffer", "data": "<base64>"}``, the same tag the
WhatsApp session library uses, so record files it wrote decode unchanged.
A plain dict that happens to have that shape (or the escape shape) is written
as ``{"type": "Object", "data": {...}}`` so decoding stays lossless.
"""

from __future__ import annotations

import base64
import json
from typing import Any

BUFFER_TAG = "Buffer"
OBJECT_TAG = "Object"
_TAGS = (BUFFER_TAG, OBJECT_TAG)


def _is_tagged(value: dict) -> bool:
    return len(value) == 2 and set(value) == {"type", "data"} and value.get("type") in _TAGS


def to_jsonable(value: Any) -> Any:
    """Return ``value`` with bytes replaced by tagged base64 strings."""

    if isinstance(value, (bytes, bytearray, memoryview)):
        return {"type": BUFFER_TAG, "data": base64.b64encode(bytes(value)).decode("ascii")}
    if isinstance(value, dict):
        encoded = {str(k): to_jsonable(v) for k, v in value.items()}
        if _is_tagged(value):
            return {"type": OBJECT_TAG, "data": encoded}
        return encoded
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def from_jsonable(value: Any) -> Any:
    """Inverse of :func:`to_jsonable`."""

    if isinstance(value, dict):
        if _is_tagged(value):
            data = value["data"]
            if value["type"] == BUFFER_TAG and isinstance(data, str):
                return base64.b64decode(data)
            if value["type"] == OBJECT_TAG and isinstance(data, dict):
                return {k: from_jsonable(v) for k, v in data.items()}
        return {k: from_jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_jsonable(v) for v in value]
    return value


def dumps(value: Any) -> bytes:
    return json.dumps(to_jsonable(value), ensure_ascii=False).encode("utf-8")


def loads(raw: bytes) -> Any:
    """Decode a record; raises ``ValueError`` when the payload is not valid JSON."""

    return from_jsonable(json.loads(raw.decode("utf-8")))


__all__ = ["dumps", "loads", "to_jsonable", "from_jsonable", "BUFFER_TAG", "OBJECT_TAG"]
