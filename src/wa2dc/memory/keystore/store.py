"""
File-backed key store for session key material.

Every ``(category, id)`` pair is persisted as its own JSON file inside the
store folder (see :mod:`.naming` for the filename scheme and :mod:`.codec` for
the value envelope). The store does not know what a category means: session
tokens, identity mappings and device lists all go through the same two calls.

Blocking file work runs in worker threads. A single :class:`asyncio.Lock`
serialises it so writes for the same record land in the order callers issued
them.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Mapping

from wa2dc.errors import StorageError
from .. import _files
from . import codec, naming

logger = logging.getLogger(__name__)


class KeyStore:
    """Schema-less persistence for ``category -> id -> value`` records."""

    def __init__(self, root: str | Path, lock: asyncio.Lock | None = None) -> None:
        self.root = Path(root)
        self._lock = lock or asyncio.Lock()

    def _path(self, category: str, key_id: str) -> Path:
        return self.root / naming.record_filename(category, key_id)

    # ------------------------------------------------------------------ #
    # WRITE helpers
    # ------------------------------------------------------------------ #

    async def set(self, records: Mapping[str, Mapping[str, Any]]) -> None:
        """
        Persist every ``(category, id, value)`` triple in ``records``.

        A ``None`` value removes the record. Any other value, falsy ones
        included, is written. Raises :class:`StorageError` on I/O failure;
        triples already written before the failure stay written.
        """
        writes: list[tuple[Path, bytes | None]] = []
        for category, entries in records.items():
            for key_id, value in (entries or {}).items():
                payload = None if value is None else codec.dumps(value)
                writes.append((self._path(category, key_id), payload))

        def _run() -> None:
            _files.ensure_dir(self.root)
            for path, payload in writes:
                if payload is None:
                    _files.remove(path)
                else:
                    _files.atomic_write(path, payload)

        if not writes:
            return
        async with self._lock:
            await asyncio.to_thread(_run)  # blocking file I/O
        logger.debug("Persisted %d key record(s) under %s", len(writes), self.root)

    async def clear(self) -> int:
        """Remove every key record; other files in the folder are left alone."""

        def _run() -> int:
            removed = 0
            for name in self._listdir():
                if naming.parse_filename(name) is not None and _files.remove(self.root / name):
                    removed += 1
            return removed

        async with self._lock:
            removed = await asyncio.to_thread(_run)
        logger.info("Cleared %d key record(s) from %s", removed, self.root)
        return removed

    # ------------------------------------------------------------------ #
    # READ helpers
    # ------------------------------------------------------------------ #

    async def get(self, category: str, ids: Iterable[str]) -> dict[str, Any]:
        """
        Return stored values for ``ids`` of ``category``.

        Ids without a record are left out of the result. A record that exists
        but cannot be decoded is logged and treated as missing; any other read
        failure raises :class:`StorageError`.
        """
        wanted = [str(key_id) for key_id in ids]

        def _run() -> dict[str, bytes]:
            found: dict[str, bytes] = {}
            for key_id in wanted:
                raw = _files.read_bytes(self._path(category, key_id))
                if raw is not None:
                    found[key_id] = raw
            return found

        async with self._lock:
            raw_records = await asyncio.to_thread(_run)  # blocking file I/O

        out: dict[str, Any] = {}
        for key_id, raw in raw_records.items():
            try:
                out[key_id] = codec.loads(raw)
            except ValueError as exc:
                logger.warning("Ignoring unreadable key record %s/%s: %s", category, key_id, exc)
        return out

    async def list_ids(self, category: str) -> list[str]:
        """Return the ids stored for ``category``, sorted."""

        prefix = naming.category_prefix(category)

        def _run() -> list[str]:
            ids = []
            for name in self._listdir():
                if not name.startswith(prefix):
                    continue
                parsed = naming.parse_filename(name)
                # "device-" also matches "device-index-*"; keep exact category hits only.
                if parsed is not None and parsed[0] == category:
                    ids.append(parsed[1])
            return sorted(ids)

        async with self._lock:
            return await asyncio.to_thread(_run)

    def _listdir(self) -> list[str]:
        try:
            return os.listdir(self.root)
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"Failed to list {self.root}: {exc}") from exc


__all__ = ["KeyStore"]
