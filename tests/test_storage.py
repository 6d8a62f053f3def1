import os

import pytest

from wa2dc.errors import InvalidStorageKey
from wa2dc.memory.storage import Storage, sanitize_storage_key


@pytest.mark.parametrize(
    "name,expected",
    [
        ("settings", "settings"),
        ("../evil", "..-evil"),
        ("a\\b/c", "a-b-c"),
        ("  chats  ", "chats"),
    ],
)
def test_sanitize_storage_key(name, expected):
    assert sanitize_storage_key(name) == expected


@pytest.mark.parametrize("name", ["", "..", ".", "\0\0", None, "   "])
def test_sanitize_rejects_unusable_names(name):
    with pytest.raises(InvalidStorageKey):
        sanitize_storage_key(name)


@pytest.mark.asyncio
async def test_upsert_get_delete(tmp_path):
    storage = Storage(tmp_path / "storage")
    await storage.upsert("../evil", "ok")

    assert os.listdir(tmp_path / "storage") == ["..-evil"]
    assert await storage.get("../evil") == b"ok"
    assert await storage.get("missing") is None

    assert await storage.delete("../evil") is True
    assert await storage.delete("../evil") is False


@pytest.mark.asyncio
async def test_json_helpers_fall_back_on_corruption(tmp_path):
    storage = Storage(tmp_path)
    await storage.save_json("chats", {"123@g.us": "channel-1"})
    assert await storage.load_json("chats") == {"123@g.us": "channel-1"}

    await storage.upsert("chats", b"{broken")
    assert await storage.load_json("chats", default={}) == {}
    assert await storage.load_json("never-saved", default=[]) == []


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
@pytest.mark.asyncio
async def test_restrictive_permissions(tmp_path):
    storage = Storage(tmp_path / "storage")
    await storage.upsert("settings", "{}")
    assert (tmp_path / "storage").stat().st_mode & 0o777 == 0o700
    assert (tmp_path / "storage" / "settings").stat().st_mode & 0o777 == 0o600
