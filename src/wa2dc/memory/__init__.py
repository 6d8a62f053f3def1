"""
Persistent and in-memory state used by the bridge.

``keystore``
    File-backed session key material (:class:`KeyStore`) and the
    multi-file auth state built on it.
``cache``
    TTL caches for group metadata and recent messages.
``refresh``
    :class:`RefreshScheduler`, the per-key debounce that repopulates the
    metadata cache.
``storage``
    Sanitised named blob storage for bridge bookkeeping files.
"""

from .keystore import KeyStore
from .cache import MetadataCache, MessageStore
from .refresh import RefreshScheduler
from .storage import Storage

__all__ = ["KeyStore", "MetadataCache", "MessageStore", "RefreshScheduler", "Storage"]
