"""
Filename scheme for key records.

Each record lives in ``<category>-<id>.json``. The category keeps the
URL-safe characters (``-`` included) readable, so a directory listing by
``"<category>-"`` finds its records. The id segment escapes every ``-`` along
with path separators, so the last ``-`` in a stem always separates category
from id and no two ``(category, id)`` pairs share a filename.
"""

from __future__ import annotations

from urllib.parse import quote, unquote

from wa2dc.errors import InvalidStorageKey

SEPARATOR = "-"
SUFFIX = ".json"


def encode_category(category: str) -> str:
    if not category:
        raise InvalidStorageKey(f"Invalid key category: {category!r}")
    return quote(category, safe="")


def encode_id(key_id: str) -> str:
    # quote() never escapes "-", so do it by hand; "%" is already escaped at this point.
    return quote(key_id, safe="").replace("-", "%2D")


def record_filename(category: str, key_id: str) -> str:
    return f"{encode_category(category)}{SEPARATOR}{encode_id(str(key_id))}{SUFFIX}"


def category_prefix(category: str) -> str:
    return f"{encode_category(category)}{SEPARATOR}"


def parse_filename(name: str) -> tuple[str, str] | None:
    """Return ``(category, id)`` for a record filename, ``None`` for anything else."""

    if not name.endswith(SUFFIX):
        return None
    stem = name[: -len(SUFFIX)]
    category, sep, encoded_id = stem.rpartition(SEPARATOR)
    if not sep or not category:
        return None
    return unquote(category), unquote(encoded_id)


__all__ = [
    "record_filename",
    "category_prefix",
    "parse_filename",
    "encode_category",
    "encode_id",
]
