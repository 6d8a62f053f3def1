"""
Named blob storage for bridge bookkeeping (settings, chat maps, timestamps).

One file per name under the storage folder. Names come from callers and are
sanitised so they can never escape that folder.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from wa2dc.errors import InvalidStorageKey
from . import _files

logger = logging.getLogger(__name__)

_SEPARATORS_RE = re.compile(r"[\\/]+")


def sanitize_storage_key(name: Any) -> str:
    """
    Map ``name`` to a safe filename.

    Path separators collapse to ``-`` and NUL bytes are dropped, so
    ``"../evil"`` becomes ``"..-evil"``. Raises :class:`InvalidStorageKey`
    when nothing usable is left.
    """
    raw = _SEPARATORS_RE.sub("-", str(name if name is not None else "")).replace("\0", "").strip()
    base = os.path.basename(raw)
    if not base or base in (".", ".."):
        raise InvalidStorageKey(f"Invalid storage key: {name!r}")
    return base


class Storage:
    """Async facade over whole-file reads and atomic writes in ``root``."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _path(self, name: Any) -> Path:
        return self.root / sanitize_storage_key(name)

    async def upsert(self, name: Any, data: str | bytes) -> None:
        path = self._path(name)
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        await asyncio.to_thread(_files.atomic_write, path, payload)

    async def get(self, name: Any) -> bytes | None:
        """Return the stored bytes for ``name`` or ``None`` if never written."""

        return await asyncio.to_thread(_files.read_bytes, self._path(name))

    async def delete(self, name: Any) -> bool:
        return await asyncio.to_thread(_files.remove, self._path(name))

    async def load_json(self, name: Any, default: Any = None) -> Any:
        """Decode ``name`` as JSON, falling back to ``default`` when missing or corrupt."""

        raw = await self.get(name)
        if raw is None:
            return default
        try:
            return json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            logger.warning("Stored %s is not valid JSON, using defaults: %s", name, exc)
            return default

    async def save_json(self, name: Any, value: Any) -> None:
        await self.upsert(name, json.dumps(value))


__all__ = ["Storage", "sanitize_storage_key"]
