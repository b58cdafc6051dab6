"""Timer port used by the scheduler, plus asyncio, thread and virtual-clock backends.

The scheduler only ever calls ``call_later(delay_ms, callback)`` and
``now_ms()``, so tests can swap in :class:`ManualTimer` and move time by hand
instead of waiting on the wall clock.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import heapq
import itertools
import threading
import time
from typing import Protocol

Callback = Callable[[], None]


class TimerHandle(Protocol):
    """Returned by ``call_later``; cancels the callback if it has not fired."""

    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class Timer(Protocol):
    """Scheduling abstraction: run callbacks later and tell the time."""

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle: ...

    def now_ms(self) -> int: ...


def _check_delay(delay_ms: float) -> float:
    if delay_ms < 0:
        raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
    return float(delay_ms)


class _AsyncioHandle:
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioTimer:
    """Schedule callbacks on an asyncio event loop.

    Zero delays still go through ``loop.call_later`` and therefore run on a
    later loop iteration, never inline.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: float, callback: Callback) -> _AsyncioHandle:
        delay = _check_delay(delay_ms)
        return _AsyncioHandle(self.loop.call_later(delay / 1000.0, callback))

    def now_ms(self) -> int:
        return int(self.loop.time() * 1000)


class _ThreadHandle:
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ThreadingTimer:
    """One daemon ``threading.Timer`` per callback; callbacks may run in parallel."""

    def __init__(self) -> None:
        self._origin = time.monotonic()
        self._timers: list[threading.Timer] = []
        self._lock = threading.Lock()

    def call_later(self, delay_ms: float, callback: Callback) -> _ThreadHandle:
        delay = _check_delay(delay_ms)
        timer = threading.Timer(delay / 1000.0, callback)
        timer.daemon = True
        with self._lock:
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
        timer.start()
        return _ThreadHandle(timer)

    def now_ms(self) -> int:
        return int((time.monotonic() - self._origin) * 1000)

    def join(self, timeout: float | None = None) -> None:
        """Wait for every started timer thread to finish."""
        with self._lock:
            timers = list(self._timers)
        for timer in timers:
            timer.join(timeout)


class _ManualHandle:
    def __init__(self, due_ms: float, sequence: int, callback: Callback) -> None:
        self.due_ms = due_ms
        self.sequence = sequence
        self.callback = callback
        self._cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __lt__(self, other: _ManualHandle) -> bool:
        return (self.due_ms, self.sequence) < (other.due_ms, other.sequence)


class ManualTimer:
    """Deterministic virtual clock.

    Nothing fires until :meth:`advance` or :meth:`run_all` is called. Due
    callbacks run in (due time, registration order) order, and the clock is
    moved to each callback's due time before it runs.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now = float(start_ms)
        self._queue: list[_ManualHandle] = []
        self._sequence = itertools.count()

    def call_later(self, delay_ms: float, callback: Callback) -> _ManualHandle:
        delay = _check_delay(delay_ms)
        handle = _ManualHandle(self._now + delay, next(self._sequence), callback)
        heapq.heappush(self._queue, handle)
        return handle

    def now_ms(self) -> int:
        return int(self._now)

    @property
    def pending(self) -> int:
        return sum(1 for handle in self._queue if not handle.cancelled)

    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms`` and fire everything due; return the count fired."""
        if ms < 0:
            raise ValueError("Cannot move the clock backwards.")
        target = self._now + ms
        fired = 0
        while self._queue and self._queue[0].due_ms <= target:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, handle.due_ms)
            handle.fired = True
            handle.callback()
            fired += 1
        self._now = target
        return fired

    def run_all(self) -> int:
        """Fire every pending callback, including ones scheduled along the way."""
        fired = 0
        while True:
            live = [handle for handle in self._queue if not handle.cancelled]
            if not live:
                self._queue.clear()
                return fired
            fired += self.advance(max(0.0, min(h.due_ms for h in live) - self._now))
