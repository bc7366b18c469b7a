"""
Schedulers - The delay primitive behind the deferred mismatch reset.

A scheduler exposes a single operation:

    after(duration_ms, callback) -> ScheduledCall

The returned handle can be cancelled. Callbacks never run inside after();
they run later, on whatever drives the scheduler (a virtual clock for tests
and the terminal, the asyncio event loop for the web service).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import asyncio
import heapq
import itertools
from typing import Callable


class ScheduledCall(ABC):
    """Cancellation handle for a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class Scheduler(ABC):
    """
    Abstract base class for delay primitives.

    Implementations must run callbacks on the same thread that calls
    after(), so the engine never sees concurrent writers.
    """

    @abstractmethod
    def after(self, duration_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        """Run callback once, duration_ms from now."""


class ManualCall(ScheduledCall):
    """Handle issued by ManualScheduler."""

    def __init__(self, due_ms: int, callback: Callable[[], None]):
        self.due_ms = due_ms
        self.callback = callback
        self.fired = False
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> bool:
        return not (self.fired or self._cancelled)


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler driven by a virtual clock.

    Nothing fires until advance() or run_all() is called.

    Usage:
        scheduler = ManualScheduler()
        scheduler.after(1000, flip_back)
        scheduler.advance(999)   # nothing
        scheduler.advance(1)     # flip_back runs
    """

    def __init__(self):
        self.now_ms = 0
        self._queue: list[tuple[int, int, ManualCall]] = []
        self._counter = itertools.count()

    def after(self, duration_ms: int, callback: Callable[[], None]) -> ManualCall:
        if duration_ms < 0:
            raise ValueError(f"duration_ms must be non-negative, got {duration_ms}")
        call = ManualCall(self.now_ms + duration_ms, callback)
        heapq.heappush(self._queue, (call.due_ms, next(self._counter), call))
        return call

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, call in self._queue if call.pending)

    def advance(self, duration_ms: int) -> int:
        """
        Move the clock forward and fire everything that became due.

        Returns the number of callbacks that ran.
        """
        target = self.now_ms + duration_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, call = heapq.heappop(self._queue)
            if not call.pending:
                continue
            self.now_ms = due_ms
            call.fired = True
            call.callback()
            fired += 1
        self.now_ms = target
        return fired

    def run_all(self) -> int:
        """Fire every outstanding callback, advancing the clock as needed."""
        fired = 0
        while any(call.pending for _, _, call in self._queue):
            next_due = min(call.due_ms for _, _, call in self._queue if call.pending)
            fired += self.advance(max(0, next_due - self.now_ms))
        return fired


class AsyncioCall(ScheduledCall):
    """Handle wrapping an asyncio TimerHandle."""

    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by loop.call_later.

    Uses the given loop, or the loop running at the time after() is called.
    Request handlers and timer callbacks then share one thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def after(self, duration_ms: int, callback: Callable[[], None]) -> AsyncioCall:
        loop = self._loop or asyncio.get_running_loop()
        return AsyncioCall(loop.call_later(duration_ms / 1000.0, callback))
