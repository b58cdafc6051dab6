"""Fan-out scheduler: one timed callback per element, one terminal event per run.

Flow of a run::

    start(elements, strategy)
        -> compute every delay (fails fast, nothing published)
        -> publish Started
        -> timer.call_later(delay, callback) for each element
    callback (under the run lock)
        -> display hook -> count it -> publish ElementDisplayed
        -> last one counted publishes Completed

``start()`` returns as soon as every callback is registered. Completion is
observed through the bus, through :attr:`Scheduler.completion`, or by
awaiting :meth:`Scheduler.wait`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
import concurrent.futures
import logging
import math
from typing import Any

from .config import PlaybackConfig
from .events.bus import EventBus
from .events.domain import Cancelled, Completed, ElementDisplayed, Failed, Started
from .exceptions import (
    EmptyInputError,
    InvalidElementError,
    SchedulerStateError,
    SchedulingFailure,
)
from .state import RunSnapshot, RunState, SchedulerState
from .strategies import DelayStrategy
from .timer import AsyncioTimer, Timer, TimerHandle

LOGGER = logging.getLogger(__name__)

DisplayHook = Callable[[Any, int], None]


class Scheduler:
    """Play back a sequence of elements, each after its own delay.

    A scheduler instance performs exactly one run. Starting it a second time,
    or after it reached a terminal state, raises :class:`SchedulerStateError`.
    """

    def __init__(
        self,
        bus: EventBus,
        timer: Timer | None = None,
        config: PlaybackConfig | None = None,
        display: DisplayHook | None = None,
    ) -> None:
        self._bus = bus
        self._timer: Timer = timer if timer is not None else AsyncioTimer()
        self._config = config if config is not None else PlaybackConfig()
        self._display = display
        self._run: RunState | None = None
        self._handles: dict[int, TimerHandle] = {}
        self.completion: concurrent.futures.Future[RunSnapshot] = concurrent.futures.Future()

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def timer(self) -> Timer:
        return self._timer

    @property
    def state(self) -> SchedulerState:
        if self._run is not None:
            return self._run.state
        return SchedulerState.IDLE

    @property
    def run(self) -> RunSnapshot | None:
        return self._run.snapshot() if self._run is not None else None

    def start(self, elements: Iterable[Any], strategy: DelayStrategy) -> None:
        """Schedule one display callback per element and return immediately."""
        if self.state is not SchedulerState.IDLE:
            raise SchedulerStateError(
                f"Scheduler is {self.state.value}; create a new scheduler for another run."
            )
        if not isinstance(strategy, DelayStrategy):
            raise TypeError("strategy must be a DelayStrategy instance.")
        if isinstance(elements, (str, bytes)) or not isinstance(elements, Iterable):
            raise TypeError("elements must be a non-string iterable.")

        items = tuple(elements)
        if not items:
            raise EmptyInputError("Cannot start a playback run without elements.")

        multiplier = self._config.base_delay_multiplier
        delays = [
            self._delay_for(strategy, item, index, multiplier)
            for index, item in enumerate(items)
        ]

        now = self._timer.now_ms()
        run = RunState(total=len(items))
        self._run = run
        with run.lock:
            run.mark_started(now)
            LOGGER.info(
                "scheduler.run.started",
                extra={
                    "event": "scheduler.run.started",
                    "total": run.total,
                    "strategy": strategy.get_name(),
                    "multiplier": multiplier,
                },
            )
            self._bus.publish(Started(timestamp=run.started_at or 0, total=run.total))
            for index, (item, delay) in enumerate(zip(items, delays)):
                if run.has_completed:
                    break
                self._handles[index] = self._timer.call_later(
                    delay, self._make_callback(run, item, index, delay)
                )

    def cancel(self) -> bool:
        """Stop callbacks that have not fired yet; returns True if this call ended the run."""
        run = self._run
        if run is None:
            return False
        with run.lock:
            # Every element already fired: the completing callback owns the run.
            if run.pending == 0:
                return False
            if not run.finish(SchedulerState.CANCELLED, self._timer.now_ms()):
                return False
            pending = run.pending
            self._cancel_handles()
            LOGGER.info(
                "scheduler.run.cancelled",
                extra={"event": "scheduler.run.cancelled", "pending": pending},
            )
            self._bus.publish(
                Cancelled(
                    timestamp=run.finished_at or 0,
                    displayed=run.completed_count,
                    pending=pending,
                )
            )
        self._resolve(run)
        return True

    async def wait(self, timeout: float | None = None) -> RunSnapshot:
        """Await the end of the run; raises the SchedulingFailure of a failed run."""
        # Shielded so a timed-out or cancelled waiter leaves ``completion`` intact.
        future = asyncio.shield(asyncio.wrap_future(self.completion))
        if timeout is None:
            return await future
        return await asyncio.wait_for(future, timeout)

    def result(self, timeout: float | None = None) -> RunSnapshot:
        """Block until the run ends. Only usable with timers that do not need this thread."""
        return self.completion.result(timeout)

    @staticmethod
    def _delay_for(strategy: DelayStrategy, element: Any, index: int, multiplier: float) -> float:
        delay = strategy.compute_delay(element, index)
        if isinstance(delay, bool) or not isinstance(delay, (int, float)):
            raise InvalidElementError(
                f"Strategy {strategy.get_name()!r} returned a non-numeric delay "
                f"for element {index}.",
                index=index,
                element=element,
            )
        delay = float(delay) * multiplier
        if not math.isfinite(delay) or delay < 0:
            raise InvalidElementError(
                f"Strategy {strategy.get_name()!r} returned an invalid delay "
                f"{delay!r} for element {index}.",
                index=index,
                element=element,
            )
        return delay

    def _make_callback(
        self, run: RunState, element: Any, index: int, delay: float
    ) -> Callable[[], None]:
        def _fire() -> None:
            self._on_fire(run, element, index, delay)

        return _fire

    def _on_fire(self, run: RunState, element: Any, index: int, delay: float) -> None:
        with run.lock:
            self._handles.pop(index, None)
            if run.has_completed:
                return
            if self._display is not None:
                try:
                    self._display(element, index)
                except Exception as exc:
                    self._fail(run, SchedulingFailure(index, element, exc))
                    return

            # Counted before publishing so a handler that cancels sees this element as displayed.
            if not run.record_display():
                return
            self._bus.publish(
                ElementDisplayed(
                    timestamp=self._timer.now_ms(),
                    element=element,
                    index=index,
                    delay=delay,
                )
            )
            if run.completed_count == run.total:
                self._complete(run)

    def _complete(self, run: RunState) -> None:
        if not run.finish(SchedulerState.COMPLETED, self._timer.now_ms()):
            return
        LOGGER.info(
            "scheduler.run.completed",
            extra={"event": "scheduler.run.completed", "total": run.total},
        )
        self._bus.publish(
            Completed(
                timestamp=run.finished_at or 0,
                total=run.total,
                displayed=run.completed_count,
            )
        )
        self._resolve(run)

    def _fail(self, run: RunState, failure: SchedulingFailure) -> None:
        if not run.finish(SchedulerState.FAILED, self._timer.now_ms(), failure=failure):
            return
        self._cancel_handles()
        LOGGER.error(
            "scheduler.run.failed",
            extra={
                "event": "scheduler.run.failed",
                "index": failure.index,
                "error_type": type(failure.original).__name__,
                "error": str(failure.original),
            },
        )
        self._bus.publish(
            Failed(
                timestamp=run.finished_at or 0,
                error=failure,
                displayed=run.completed_count,
                index=failure.index,
            )
        )
        self._resolve(run)

    def _cancel_handles(self) -> None:
        handles = list(self._handles.values())
        self._handles.clear()
        for handle in handles:
            handle.cancel()

    def _resolve(self, run: RunState) -> None:
        if self.completion.done():
            return
        if run.state is SchedulerState.FAILED and run.failure is not None:
            self.completion.set_exception(run.failure)
        else:
            self.completion.set_result(run.snapshot())
