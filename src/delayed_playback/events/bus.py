"""Event bus fanning lifecycle events out to attached observers.

Usage:
    bus = EventBus()

    class Printer:
        def on_event(self, event):
            print(event.type, getattr(event, "index", None))

    printer = Printer()
    bus.attach(printer)

    # Delivered synchronously, in attachment order
    bus.publish(Started(timestamp=0, total=3))
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import threading
from typing import Any, Protocol, runtime_checkable

from ..exceptions import ObserverFailure
from .domain import LifecycleEvent

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Observer(Protocol):
    """Anything that wants to receive lifecycle events."""

    def on_event(self, event: LifecycleEvent) -> None: ...


ErrorHandler = Callable[[ObserverFailure], None]


def log_observer_failure(failure: ObserverFailure) -> None:
    """Default error channel: record the failure in the log and move on."""
    LOGGER.warning(
        "bus.observer.failed",
        extra={
            "event": "bus.observer.failed",
            "observer": repr(failure.observer),
            "event_type": str(getattr(failure.event, "type", "")),
            "error_type": type(failure.original).__name__,
            "error": str(failure.original),
        },
    )


class EventBus:
    """Synchronous publish/subscribe core.

    Observers are kept in attachment order. Attaching an observer that is
    already attached is a no-op. Each ``publish`` iterates over a snapshot of
    the registry, so attach/detach from inside a handler only affects later
    publishes. Exceptions raised by observers never reach the publisher: they
    are wrapped in :class:`ObserverFailure` and handed to ``error_handler``.
    """

    def __init__(self, error_handler: ErrorHandler | None = None) -> None:
        self._observers: list[Any] = []
        self._lock = threading.Lock()
        self._error_handler = error_handler or log_observer_failure
        self._failure_count = 0

    @property
    def observers(self) -> tuple[Any, ...]:
        with self._lock:
            return tuple(self._observers)

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)

    def __contains__(self, observer: object) -> bool:
        with self._lock:
            return any(existing is observer for existing in self._observers)

    def attach(self, observer: Observer | Callable[[LifecycleEvent], None]) -> bool:
        """Attach an observer.

        Args:
            observer: Object with an ``on_event`` method, or a plain callable.

        Returns:
            True when added, False when it was already attached.
        """
        if not (isinstance(observer, Observer) or callable(observer)):
            raise TypeError("observer must define on_event() or be callable")
        with self._lock:
            if any(existing is observer for existing in self._observers):
                return False
            self._observers.append(observer)
        LOGGER.debug(f"Attached observer: {observer!r}")
        return True

    def detach(self, observer: object) -> bool:
        """Detach an observer; detaching an unknown observer does nothing."""
        with self._lock:
            for position, existing in enumerate(self._observers):
                if existing is observer:
                    del self._observers[position]
                    break
            else:
                return False
        LOGGER.debug(f"Detached observer: {observer!r}")
        return True

    def publish(self, event: LifecycleEvent) -> None:
        """Deliver ``event`` to every attached observer in attachment order."""
        with self._lock:
            snapshot = list(self._observers)

        for observer in snapshot:
            handler = getattr(observer, "on_event", observer)
            try:
                handler(event)
            except Exception as exc:
                with self._lock:
                    self._failure_count += 1
                self._report(ObserverFailure(observer, event, exc))

    def clear(self) -> None:
        """Detach every observer."""
        with self._lock:
            self._observers.clear()

    def _report(self, failure: ObserverFailure) -> None:
        try:
            self._error_handler(failure)
        except Exception as exc:
            LOGGER.error(f"Observer error handler failed: {exc}")
