"""
Persistent key material.

Modules
=======

``store``
    Defines :class:`~wa2dc.memory.keystore.store.KeyStore`, the file-backed
    ``category -> id -> value`` store used by the session library.
``codec``
    JSON envelope that round-trips binary and structured values.
``naming``
    Collision-free ``<category>-<id>.json`` filename scheme.
``auth_state``
    ``creds.json`` handling and session folder helpers built on the store.
"""

from .store import KeyStore
from .auth_state import AuthState, load_auth_state, delete_session

__all__ = ["KeyStore", "AuthState", "load_auth_state", "delete_session"]
