"""
Per-key debounced refresh scheduling.

``schedule(key)`` (re)arms a timer for ``key``. Only when a key stays quiet
for ``delay_ms`` does the scheduler run ``refresh_fn(key)``, so a burst of
group updates ends up as a single metadata fetch.

The pending entry is removed *before* the callback runs. A refresh that
raises therefore leaves nothing behind and the key can be scheduled again
right away. The failure is logged and passed to the event loop's exception
handler as a :class:`~wa2dc.errors.RefreshError`, because the caller of
``schedule`` returned long before it happened.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

from wa2dc.errors import RefreshError

logger = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 750

RefreshFn = Callable[[str], Awaitable[Any] | Any]


class RefreshScheduler:
    """Debounce table mapping each pending key to its timer handle."""

    def __init__(self, refresh_fn: RefreshFn, delay_ms: int = DEFAULT_DELAY_MS) -> None:
        if not callable(refresh_fn):
            raise TypeError("refresh_fn must be callable")
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        self._refresh_fn = refresh_fn
        self.delay_ms = delay_ms
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._running: set[asyncio.Task] = set()

    def schedule(self, key: Any) -> None:
        """Arm the timer for ``key``, restarting it if one is already pending."""

        if not key:
            return
        key = str(key)
        loop = asyncio.get_running_loop()
        previous = self._timers.pop(key, None)
        if previous is not None:
            previous.cancel()
        self._timers[key] = loop.call_later(self.delay_ms / 1000, self._fire, key)

    def clear_all(self) -> None:
        """Cancel every pending timer. Refreshes already running are not touched."""

        for handle in self._timers.values():
            handle.cancel()
        if self._timers:
            logger.debug("Cancelled %d pending refresh(es)", len(self._timers))
        self._timers.clear()

    @property
    def pending(self) -> list[str]:
        return sorted(self._timers)

    def __len__(self) -> int:
        return len(self._timers)

    async def drain(self) -> None:
        """Wait until every refresh that has already fired has finished."""

        while self._running:
            await asyncio.gather(*list(self._running), return_exceptions=True)

    def _fire(self, key: str) -> None:
        self._timers.pop(key, None)
        task = asyncio.get_running_loop().create_task(self._run(key))
        self._running.add(task)
        task.add_done_callback(self._running.discard)

    async def _run(self, key: str) -> None:
        try:
            result = self._refresh_fn(key)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            logger.warning("Scheduled refresh for %s failed: %s", key, exc)
            error = RefreshError(key, exc)
            error.__cause__ = exc
            asyncio.get_running_loop().call_exception_handler(
                {
                    "message": f"Scheduled refresh for {key!r} failed",
                    "exception": error,
                }
            )


__all__ = ["RefreshScheduler", "DEFAULT_DELAY_MS"]
