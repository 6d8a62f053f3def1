"""Bounded TTL store of recently seen messages, looked up by message key."""

from __future__ import annotations

import time
from typing import Any, Callable, Mapping

DEFAULT_TTL_MS = 7 * 24 * 60 * 60 * 1000
DEFAULT_MAX_ENTRIES = 2000


def build_key(key: Mapping[str, Any] | None) -> str | None:
    """Return ``"<remoteJid>|<id>"`` for a message key, or ``None`` without an id."""

    key = key or {}
    msg_id = key.get("id") or key.get("keyId")
    if not msg_id:
        return None
    remote = key.get("remoteJid") or key.get("participant") or key.get("participantId") or ""
    return f"{remote}|{msg_id}"


class MessageStore:
    """Keeps the newest ``max_entries`` messages for up to ``ttl_ms``."""

    def __init__(
        self,
        ttl_ms: int = DEFAULT_TTL_MS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.ttl_ms = ttl_ms
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, tuple[dict, float]] = {}

    def get(self, key: Mapping[str, Any] | None) -> dict | None:
        cache_key = build_key(key)
        if cache_key is None:
            return None
        entry = self._entries.get(cache_key)
        if entry is None:
            return None
        message, expires_at = entry
        if expires_at <= self._clock():
            del self._entries[cache_key]
            return None
        return message

    def set(self, message: Mapping[str, Any] | None) -> dict | None:
        """Store ``message`` under its ``key`` and evict the oldest overflow."""

        if not message:
            return None
        cache_key = build_key(message.get("key"))
        if cache_key is None:
            return None
        self._entries[cache_key] = (dict(message), self._clock() + self.ttl_ms / 1000)
        self.prune()
        return self._entries[cache_key][0]

    def prune(self) -> None:
        overflow = len(self._entries) - self.max_entries
        if overflow <= 0:
            return
        # dicts keep insertion order, so the first keys are the oldest.
        for cache_key in list(self._entries)[:overflow]:
            del self._entries[cache_key]

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["MessageStore", "build_key", "DEFAULT_TTL_MS", "DEFAULT_MAX_ENTRIES"]
