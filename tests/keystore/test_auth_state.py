import json

import pytest

from wa2dc.memory.keystore import delete_session, load_auth_state


@pytest.mark.asyncio
async def test_fresh_folder_has_empty_creds(tmp_path):
    state = await load_auth_state(tmp_path / "baileys")
    assert state.creds == {}
    assert (tmp_path / "baileys").is_dir()


@pytest.mark.asyncio
async def test_creds_persist_across_restarts(tmp_path):
    folder = tmp_path / "baileys"
    state = await load_auth_state(folder)
    state.creds.update({"me": {"id": "1@s.whatsapp.net"}, "advSecretKey": b"\x01\x02"})
    await state.save_creds()
    await state.keys.set({"pre-key": {"1": {"public": b"p", "private": b"q"}}})

    reopened = await load_auth_state(folder)
    assert reopened.creds == {"me": {"id": "1@s.whatsapp.net"}, "advSecretKey": b"\x01\x02"}
    assert await reopened.keys.get("pre-key", ["1"]) == {"1": {"public": b"p", "private": b"q"}}


@pytest.mark.asyncio
async def test_corrupt_creds_start_fresh(tmp_path):
    folder = tmp_path / "baileys"
    folder.mkdir()
    (folder / "creds.json").write_text("{oops")
    assert (await load_auth_state(folder)).creds == {}

    (folder / "creds.json").write_text(json.dumps([1, 2]))
    assert (await load_auth_state(folder)).creds == {}


@pytest.mark.asyncio
async def test_delete_session_removes_every_file(tmp_path):
    folder = tmp_path / "baileys"
    state = await load_auth_state(folder)
    await state.save_creds()
    await state.keys.set({"session": {"a": b"1"}})

    assert await delete_session(folder) == 2
    assert list(folder.iterdir()) == []
    assert await delete_session(tmp_path / "missing") == 0
