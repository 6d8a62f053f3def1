"""
In-memory caches.

``metadata``
    :class:`MetadataCache`, the uniform-TTL snapshot cache used for group
    metadata.
``messages``
    :class:`MessageStore`, a bounded TTL store of recent messages that the
    session library queries when it needs to resend or decrypt a retry.
"""

from .metadata import MetadataCache, GROUP_METADATA_TTL_MS
from .messages import MessageStore

__all__ = ["MetadataCache", "MessageStore", "GROUP_METADATA_TTL_MS"]
