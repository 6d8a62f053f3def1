import asyncio

import pytest

from wa2dc.errors import RefreshError
from wa2dc.memory.refresh import DEFAULT_DELAY_MS, RefreshScheduler

DELAY_MS = 40


def _recorder():
    calls: list[str] = []

    async def refresh(key: str) -> None:
        calls.append(key)

    return calls, refresh


@pytest.mark.asyncio
async def test_debounces_per_key():
    calls, refresh = _recorder()
    scheduler = RefreshScheduler(refresh, DELAY_MS)

    scheduler.schedule("abc")
    scheduler.schedule("abc")
    scheduler.schedule("def")
    assert calls == []
    assert scheduler.pending == ["abc", "def"]

    await asyncio.sleep(DELAY_MS / 1000 * 3)
    await scheduler.drain()

    assert sorted(calls) == ["abc", "def"]
    assert len(scheduler) == 0


@pytest.mark.asyncio
async def test_reschedule_resets_the_window():
    calls, refresh = _recorder()
    scheduler = RefreshScheduler(refresh, 100)

    # Six triggers 25ms apart span longer than one window; a reset keeps it quiet.
    for _ in range(6):
        scheduler.schedule("burst")
        await asyncio.sleep(0.025)
    assert calls == []

    await asyncio.sleep(0.2)
    await scheduler.drain()
    assert calls == ["burst"]


@pytest.mark.asyncio
async def test_clear_all_cancels_pending_not_future():
    calls, refresh = _recorder()
    scheduler = RefreshScheduler(refresh, DELAY_MS)

    scheduler.schedule("xyz")
    scheduler.clear_all()
    await asyncio.sleep(DELAY_MS / 1000 * 2)
    assert calls == []
    assert len(scheduler) == 0

    scheduler.schedule("xyz")
    await asyncio.sleep(DELAY_MS / 1000 * 3)
    await scheduler.drain()
    assert calls == ["xyz"]


@pytest.mark.asyncio
async def test_fires_once_then_accepts_a_fresh_schedule():
    calls, refresh = _recorder()
    scheduler = RefreshScheduler(refresh, DELAY_MS)

    scheduler.schedule("g")
    await asyncio.sleep(DELAY_MS / 1000 * 3)
    scheduler.schedule("g")
    await asyncio.sleep(DELAY_MS / 1000 * 3)
    await scheduler.drain()

    assert calls == ["g", "g"]


@pytest.mark.asyncio
async def test_failed_refresh_is_reported_and_key_not_stuck():
    loop = asyncio.get_running_loop()
    reported: list[dict] = []
    loop.set_exception_handler(lambda _loop, context: reported.append(context))
    attempts: list[str] = []

    async def flaky(key: str) -> None:
        attempts.append(key)
        raise ConnectionError("offline")

    scheduler = RefreshScheduler(flaky, DELAY_MS)
    try:
        scheduler.schedule("g")
        await asyncio.sleep(DELAY_MS / 1000 * 3)
        await scheduler.drain()

        assert attempts == ["g"]
        assert len(scheduler) == 0
        assert isinstance(reported[0]["exception"], RefreshError)
        assert reported[0]["exception"].key == "g"
        assert isinstance(reported[0]["exception"].__cause__, ConnectionError)

        scheduler.schedule("g")
        assert scheduler.pending == ["g"]
        await asyncio.sleep(DELAY_MS / 1000 * 3)
        await scheduler.drain()
        assert attempts == ["g", "g"]
    finally:
        loop.set_exception_handler(None)


@pytest.mark.asyncio
async def test_sync_callbacks_and_key_normalisation():
    calls: list[str] = []
    scheduler = RefreshScheduler(calls.append, DELAY_MS)

    scheduler.schedule(None)
    scheduler.schedule("")
    scheduler.schedule(12345)
    assert scheduler.pending == ["12345"]

    await asyncio.sleep(DELAY_MS / 1000 * 3)
    await scheduler.drain()
    assert calls == ["12345"]


def test_constructor_validation():
    with pytest.raises(TypeError):
        RefreshScheduler(None)
    with pytest.raises(ValueError):
        RefreshScheduler(lambda key: None, -1)
    assert RefreshScheduler(lambda key: None).delay_ms == DEFAULT_DELAY_MS == 750
