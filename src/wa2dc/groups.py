"""
Group metadata coordination.

:class:`GroupMetadataService` keeps the metadata cache in step with the
WhatsApp session: it primes the cache when the connection opens, caches what
group events carry, and asks the :class:`RefreshScheduler` for a debounced
full fetch whenever a group changes. Group subjects are mirrored into the
shared contacts mapping used for channel names.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Mapping, MutableMapping

from . import maintenance
from .memory.cache import MetadataCache
from .memory.refresh import DEFAULT_DELAY_MS, RefreshScheduler

logger = logging.getLogger(__name__)

FetchGroup = Callable[[str], Awaitable[Mapping[str, Any]]]
FetchAllGroups = Callable[[], Awaitable[Mapping[str, Mapping[str, Any]]]]

DEFAULT_PRUNE_INTERVAL = 60 * 60


def format_jid(jid: Any) -> str | None:
    """Strip the device part from ``user:device@server``; ``None`` for empty input."""

    if not jid:
        return None
    text = str(jid)
    user, sep, server = text.partition("@")
    if not sep or not server:
        return text
    return f"{user.split(':')[0]}@{server}"


def _as_list(items: Any) -> list:
    if items is None:
        return []
    if isinstance(items, (list, tuple)):
        return list(items)
    return [items]


class GroupMetadataService:
    """Owns one metadata cache and the refresh scheduler that feeds it."""

    def __init__(
        self,
        cache: MetadataCache,
        fetch_group: FetchGroup,
        *,
        contacts: MutableMapping[str, str] | None = None,
        delay_ms: int = DEFAULT_DELAY_MS,
    ) -> None:
        self.cache = cache
        self.contacts: MutableMapping[str, str] = contacts if contacts is not None else {}
        self._fetch_group = fetch_group
        self.scheduler = RefreshScheduler(self.refresh, delay_ms)
        self._prune_task: asyncio.Task | None = None

    # ------------------------------------------------------------------ #
    # Cache access
    # ------------------------------------------------------------------ #

    def cached(self, jid: Any) -> Mapping[str, Any] | None:
        """Lookup used by the session library's ``cachedGroupMetadata`` hook."""

        normalized = format_jid(jid)
        return self.cache.get(normalized) if normalized else None

    def cache_metadata(self, metadata: Mapping[str, Any] | None) -> None:
        normalized = format_jid((metadata or {}).get("id"))
        if not normalized:
            return
        self.cache.set(normalized, metadata)
        subject = metadata.get("subject")
        if subject:
            self.contacts[normalized] = subject

    async def refresh(self, jid: Any) -> Mapping[str, Any] | None:
        """Fetch fresh metadata for ``jid``; failures are logged and return ``None``."""

        normalized = format_jid(jid)
        if not normalized:
            return None
        self.cache.invalidate(normalized)
        try:
            metadata = await self._fetch_group(normalized)
        except Exception as exc:
            logger.warning("Failed to refresh group metadata for %s: %s", normalized, exc)
            return None
        self.cache_metadata(metadata)
        return metadata

    # ------------------------------------------------------------------ #
    # Session event hooks
    # ------------------------------------------------------------------ #

    def on_groups_upsert(self, groups: Iterable[Mapping[str, Any]] | Mapping[str, Any]) -> None:
        for group in _as_list(groups):
            if not group:
                continue
            self.cache_metadata(group)
            self.scheduler.schedule(format_jid(group.get("id")))

    def on_groups_update(self, updates: Iterable[Mapping[str, Any]] | Mapping[str, Any]) -> None:
        for update in _as_list(updates):
            if not update or not update.get("id"):
                continue
            # Partial updates only carry changed fields; keep the subject, refetch the rest.
            if update.get("subject"):
                self.cache_metadata({"id": update["id"], "subject": update["subject"]})
            self.scheduler.schedule(format_jid(update["id"]))

    def on_participants_update(self, event: Mapping[str, Any] | None) -> None:
        if event and event.get("id"):
            self.scheduler.schedule(format_jid(event["id"]))

    async def on_connection_open(self, fetch_all: FetchAllGroups) -> None:
        """Prime the cache with every group the account participates in."""

        try:
            groups = await fetch_all()
        except Exception as exc:
            logger.error("Failed to fetch participating groups: %s", exc)
            return
        self.cache.prime(groups)
        for jid, data in (groups or {}).items():
            subject = (data or {}).get("subject")
            if subject:
                self.contacts[jid] = subject
        logger.info("Primed group metadata cache with %d group(s)", len(groups or {}))

    def on_connection_close(self) -> None:
        self.scheduler.clear_all()
        self.cache.clear()

    # ------------------------------------------------------------------ #
    # Housekeeping
    # ------------------------------------------------------------------ #

    async def start_pruning(self, interval: float = DEFAULT_PRUNE_INTERVAL) -> asyncio.Task:
        if self._prune_task is None or self._prune_task.done():
            logger.info("Starting group metadata pruning (interval=%ds)", interval)
            self._prune_task = await maintenance.startup(self.cache.prune, interval)
        return self._prune_task

    async def stop_pruning(self) -> None:
        await maintenance.shutdown(self._prune_task)
        self._prune_task = None


__all__ = ["GroupMetadataService", "format_jid"]
