"""Error types raised by the persistent state layer."""

from __future__ import annotations


class StorageError(OSError):
    """Raised when persisted state cannot be read or written."""

    pass


class InvalidStorageKey(StorageError, ValueError):
    """Raised when a storage name or key category cannot be mapped to a file."""

    pass


class RefreshError(RuntimeError):
    """Wraps a failure raised by a scheduled refresh callback."""

    def __init__(self, key: str, cause: BaseException) -> None:
        super().__init__(f"Refresh for {key!r} failed: {cause}")
        self.key = key
        self.cause = cause


__all__ = ["StorageError", "InvalidStorageKey", "RefreshError"]
