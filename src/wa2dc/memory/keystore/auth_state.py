"""
Multi-file session state: ``creds.json`` plus one file per key record.

``creds.json`` and the value encoding match what the WhatsApp session library
writes. Record filenames do not always match: ids containing ``:``, ``@`` or
``/`` are percent-encoded here, where the Node library rewrites them with
``-`` and ``__``, so those records in a Node session folder are not found.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from wa2dc.errors import StorageError
from .. import _files
from . import codec
from .store import KeyStore

logger = logging.getLogger(__name__)

CREDS_FILENAME = "creds.json"


@dataclass
class AuthState:
    """Session credentials and the key store that backs them."""

    folder: Path
    keys: KeyStore
    creds: dict[str, Any] = field(default_factory=dict)

    async def save_creds(self) -> None:
        """Persist :attr:`creds`; hooked to the session's ``creds.update`` event."""

        payload = codec.dumps(self.creds)
        path = self.folder / CREDS_FILENAME
        await asyncio.to_thread(_files.atomic_write, path, payload)


async def load_auth_state(folder: str | Path) -> AuthState:
    """Open (creating if needed) the session folder and read its credentials."""

    root = Path(folder)
    await asyncio.to_thread(_files.ensure_dir, root)
    raw = await asyncio.to_thread(_files.read_bytes, root / CREDS_FILENAME)

    creds: dict[str, Any] = {}
    if raw is not None:
        try:
            loaded = codec.loads(raw)
        except ValueError as exc:
            logger.warning("Session credentials in %s are unreadable, starting fresh: %s", root, exc)
        else:
            if isinstance(loaded, dict):
                creds = loaded
            else:
                logger.warning("Session credentials in %s are not an object, starting fresh", root)

    return AuthState(folder=root, keys=KeyStore(root), creds=creds)


async def delete_session(folder: str | Path) -> int:
    """Remove every file in the session folder; returns how many were deleted."""

    root = Path(folder)

    def _run() -> int:
        try:
            names = os.listdir(root)
        except FileNotFoundError:
            return 0
        except OSError as exc:
            raise StorageError(f"Failed to list {root}: {exc}") from exc
        removed = 0
        for name in names:
            path = root / name
            if path.is_file() and _files.remove(path):
                removed += 1
        return removed

    removed = await asyncio.to_thread(_run)
    logger.info("Deleted %d session file(s) from %s", removed, root)
    return removed


__all__ = ["AuthState", "load_auth_state", "delete_session", "CREDS_FILENAME"]
