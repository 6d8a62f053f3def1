"""
Helpers for periodic background housekeeping.

Callers hand a zero-argument callable (sync or async) to :func:`startup` and
keep the returned task so :func:`shutdown` can cancel it when the bridge
disconnects.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


async def startup(task_fn: Callable[[], Awaitable[Any] | Any], interval: float) -> asyncio.Task:
    """
    Schedule ``task_fn`` to run every ``interval`` seconds.

    The first run happens after one interval. Exceptions raised by
    ``task_fn`` are logged and do not stop the loop.
    """

    async def _periodic() -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                result = task_fn()
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.error("Maintenance cycle failed: %s", exc)

    return asyncio.create_task(_periodic())


async def shutdown(task: asyncio.Task | None) -> None:
    """Cancel a task started with :func:`startup`; ``None`` is accepted."""

    if not task:
        return

    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
