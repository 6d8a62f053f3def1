"""
In-memory TTL cache for group metadata snapshots.

Every entry carries the monotonic time it expires; an entry is valid while
``now < expires_at``. ``get`` checks that on each read, so
``prune`` only reclaims memory and never changes what callers see.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)

GROUP_METADATA_TTL_MS = 5 * 60 * 1000

Clock = Callable[[], float]


class MetadataCache:
    """Uniform-TTL cache keyed by string (usually a group jid)."""

    def __init__(self, ttl_ms: int = GROUP_METADATA_TTL_MS, *, clock: Clock = time.monotonic) -> None:
        if ttl_ms < 0:
            raise ValueError("ttl_ms must be >= 0")
        self.ttl_ms = ttl_ms
        self._ttl = ttl_ms / 1000
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` if absent or expired."""

        if not key:
            return None
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any) -> Any:
        """Insert or overwrite ``key``; empty keys and ``None`` values are ignored."""

        if not key or value is None:
            return None
        self._entries[key] = (value, self._clock() + self._ttl)
        return value

    def prime(self, entries: Mapping[str, Any] | None) -> None:
        """Bulk insert ``entries`` with a single timestamp."""

        expires_at = self._clock() + self._ttl
        for key, value in (entries or {}).items():
            if key and value is not None:
                self._entries[key] = (value, expires_at)
        logger.debug("Primed metadata cache with %d entries", len(entries or {}))

    def invalidate(self, key: str) -> None:
        """Drop ``key`` regardless of remaining TTL."""

        if key:
            self._entries.pop(key, None)

    def prune(self) -> int:
        """Physically remove expired entries; returns how many were dropped."""

        now = self._clock()
        stale = [k for k, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("Pruned %d stale metadata entries", len(stale))
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["MetadataCache", "GROUP_METADATA_TTL_MS"]
