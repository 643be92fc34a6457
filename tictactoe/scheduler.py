"""
Deferred actions for the game session.

The session only needs two calls, the same ones a tkinter root offers:

    handle = scheduler.after(delay_ms, callback)
    scheduler.after_cancel(handle)

so a Tk root, a DeferredQueue, or an AsyncioScheduler can all drive it.
Everything runs on one thread; nothing here starts threads.
"""

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Tuple


class DeferredQueue:
    """
    A virtual-clock callback queue.

    Nothing runs until the owner calls advance() or run_pending(), which
    makes AI turns easy to step through in tests and console loops.
    """

    def __init__(self):
        self.now_ms = 0
        self._queue: List[Tuple[int, int, Callable[[], None]]] = []
        self._cancelled = set()
        self._counter = itertools.count()

    def after(self, delay_ms: int, callback: Callable[[], None]) -> int:
        """Schedule callback delay_ms after the current virtual time."""
        handle = next(self._counter)
        heapq.heappush(self._queue, (self.now_ms + max(0, int(delay_ms)), handle, callback))
        return handle

    def after_cancel(self, handle: int):
        self._cancelled.add(handle)

    def pending(self) -> int:
        """Number of callbacks still waiting to run."""
        return sum(1 for _, handle, _ in self._queue if handle not in self._cancelled)

    def advance(self, ms: int) -> int:
        """
        Move the clock forward and run whatever became due.

        Returns:
            Number of callbacks run.
        """
        target = self.now_ms + ms
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, handle, callback = heapq.heappop(self._queue)
            self.now_ms = max(self.now_ms, due)
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            callback()
            ran += 1
        self.now_ms = target
        return ran

    def run_pending(self) -> int:
        """
        Run every queued callback, including ones queued while running.

        Returns:
            Number of callbacks run.
        """
        ran = 0
        while self._queue:
            due, handle, callback = heapq.heappop(self._queue)
            self.now_ms = max(self.now_ms, due)
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            callback()
            ran += 1
        return ran


class AsyncioScheduler:
    """Runs deferred actions on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop

    def after(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self.loop or asyncio.get_running_loop()
        return loop.call_later(max(0, delay_ms) / 1000.0, callback)

    def after_cancel(self, handle: asyncio.TimerHandle):
        handle.cancel()
