"""Lifecycle events and the bus that fans them out to observers."""

from .bus import EventBus, Observer, log_observer_failure
from .domain import (
    TERMINAL_EVENT_TYPES,
    Cancelled,
    Completed,
    ElementDisplayed,
    EventType,
    Failed,
    LifecycleEvent,
    Started,
    is_terminal,
)

__all__ = [
    "Cancelled",
    "Completed",
    "ElementDisplayed",
    "EventBus",
    "EventType",
    "Failed",
    "LifecycleEvent",
    "Observer",
    "Started",
    "TERMINAL_EVENT_TYPES",
    "is_terminal",
    "log_observer_failure",
]
