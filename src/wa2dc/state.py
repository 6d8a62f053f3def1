"""
Bridge state bundle.

Everything the platform handlers need from the state layer is collected in a
:class:`BridgeState` built once at startup and passed to the handlers, rather
than reached through module globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .config import Config, settings as default_settings
from .groups import FetchGroup, GroupMetadataService, format_jid
from .memory.cache import MessageStore, MetadataCache
from .memory.keystore import AuthState, KeyStore, load_auth_state
from .memory.storage import Storage

logger = logging.getLogger(__name__)


@dataclass
class BridgeState:
    auth: AuthState
    storage: Storage
    groups: GroupMetadataService
    messages: MessageStore
    contacts: dict[str, str] = field(default_factory=dict)

    @property
    def keys(self) -> KeyStore:
        return self.auth.keys

    @property
    def group_cache(self) -> MetadataCache:
        return self.groups.cache

    def store_message(self, message: Mapping[str, Any] | None) -> dict | None:
        """Remember ``message`` under its device-less jids for later retry lookups."""

        if not message or not message.get("key"):
            return None
        return self.messages.set({**message, "key": _normalize_key(message["key"])})

    def get_message(self, key: Mapping[str, Any] | None) -> dict | None:
        """Lookup used by the session library's ``getMessage`` hook."""

        if not key:
            return None
        return self.messages.get(_normalize_key(key))

    async def close(self) -> None:
        """Stop background work and flush session credentials."""

        self.groups.on_connection_close()
        await self.groups.stop_pruning()
        await self.groups.scheduler.drain()
        await self.auth.save_creds()


def _normalize_key(key: Mapping[str, Any]) -> dict:
    normalized = dict(key)
    normalized["remoteJid"] = format_jid(key.get("remoteJid"))
    normalized["participant"] = format_jid(key.get("participant") or key.get("participantAlt"))
    return normalized


async def build_state(fetch_group: FetchGroup, settings: Config | None = None) -> BridgeState:
    """
    Assemble a :class:`BridgeState` from ``settings``.

    ``fetch_group`` is the session client's group metadata call; it is what
    debounced refreshes invoke.
    """
    settings = settings or default_settings
    auth = await load_auth_state(Path(settings.storage.AUTH_DIR))
    contacts: dict[str, str] = {}
    group_cache = MetadataCache(settings.cache.GROUP_METADATA_TTL_MS)
    groups = GroupMetadataService(
        group_cache,
        fetch_group,
        contacts=contacts,
        delay_ms=settings.cache.GROUP_REFRESH_DELAY_MS,
    )
    messages = MessageStore(
        settings.cache.MESSAGE_STORE_TTL_MS,
        settings.cache.MESSAGE_STORE_MAX_ENTRIES,
    )
    await groups.start_pruning(settings.cache.GROUP_CACHE_PRUNE_INTERVAL)
    logger.info("Bridge state ready (storage=%s, auth=%s)", settings.storage.STORAGE_DIR, auth.folder)
    return BridgeState(
        auth=auth,
        storage=Storage(settings.storage.STORAGE_DIR),
        groups=groups,
        messages=messages,
        contacts=contacts,
    )


__all__ = ["BridgeState", "build_state"]
