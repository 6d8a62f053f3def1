"""
Blocking file helpers shared by the on-disk stores.

Both :mod:`wa2dc.memory.keystore` and :mod:`wa2dc.memory.storage` call these
from worker threads. Writes go to a temp file in the destination directory and
are moved into place with :func:`os.replace`, so a reader sees either the old
file or the new one and never a partial write.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from wa2dc.errors import StorageError

DIR_MODE = 0o700
FILE_MODE = 0o600
TMP_SUFFIX = ".tmp"


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"Cannot create storage directory {path}: {exc}") from exc


def atomic_write(path: Path, data: bytes) -> None:
    """Replace ``path`` with ``data`` or leave it untouched on failure."""

    ensure_dir(path.parent)
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=TMP_SUFFIX)
    except OSError as exc:
        raise StorageError(f"Cannot create temp file for {path}: {exc}") from exc
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        if os.name != "nt":
            os.chmod(tmp_name, FILE_MODE)
        # Atomic rename keeps partially written files from being observed by readers.
        os.replace(tmp_name, path)
    except OSError as exc:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise StorageError(f"Failed to write {path}: {exc}") from exc


def read_bytes(path: Path) -> bytes | None:
    """Return the contents of ``path`` or ``None`` if it does not exist."""

    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise StorageError(f"Failed to read {path}: {exc}") from exc


def remove(path: Path) -> bool:
    """Delete ``path``; returns ``False`` when it was already gone."""

    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise StorageError(f"Failed to remove {path}: {exc}") from exc
    return True
