"""
Reveal Scheduler

The reveal sequence is the only part of the engine that spans time. The
engine hands the reveal coroutine to a scheduler and awaits
``scheduler.sleep`` between tiles, so the host decides how time passes.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Coroutine, Optional


class RevealScheduler(ABC):
    """Runs reveal coroutines and provides the pause between reveal steps."""

    def __init__(self, delay: float):
        self.delay = max(0.0, float(delay))
        self._tasks = set()

    async def sleep(self) -> None:
        await asyncio.sleep(self.delay)

    @abstractmethod
    def spawn(self, coro: Coroutine[Any, Any, None]) -> Optional[asyncio.Task]:
        """Start running ``coro``. May return a task handle."""

    def _create_task(self, loop: asyncio.AbstractEventLoop, coro) -> asyncio.Task:
        task = loop.create_task(coro)
        # Keep a strong reference until the task finishes
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every reveal that is still in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))


class AsyncioScheduler(RevealScheduler):
    """
    Schedules reveals as tasks on the running asyncio loop.

    ``spawn`` must be called from inside a running loop; the submit call
    returns immediately and the reveal proceeds while other tasks run.
    """

    def spawn(self, coro):
        return self._create_task(asyncio.get_running_loop(), coro)


class BlockingScheduler(RevealScheduler):
    """
    Drives each reveal to completion before ``spawn`` returns.

    Used by synchronous hosts (one Flask request per key press) and, with
    ``delay=0``, as an immediate clock in tests. When called from inside a
    running event loop it cannot block that loop, so the reveal becomes a
    task on it instead.
    """

    def spawn(self, coro):
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is not None:
            return self._create_task(running, coro)

        loop = asyncio.new_event_loop()
        try:
            loop.run_until_complete(coro)
        finally:
            loop.close()
        return None
