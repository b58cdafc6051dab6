from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class EventType(str, Enum):
    STARTED = "started"
    ELEMENT_DISPLAYED = "element_displayed"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_EVENT_TYPES = frozenset(
    {EventType.COMPLETED, EventType.FAILED, EventType.CANCELLED}
)


@dataclass(frozen=True)
class Started:
    timestamp: int
    total: int
    type: EventType = field(default=EventType.STARTED, init=False)


@dataclass(frozen=True)
class ElementDisplayed:
    timestamp: int
    element: Any
    index: int
    delay: float
    type: EventType = field(default=EventType.ELEMENT_DISPLAYED, init=False)


@dataclass(frozen=True)
class Completed:
    timestamp: int
    total: int
    displayed: int
    type: EventType = field(default=EventType.COMPLETED, init=False)


@dataclass(frozen=True)
class Failed:
    timestamp: int
    error: BaseException
    displayed: int
    index: int | None = None
    type: EventType = field(default=EventType.FAILED, init=False)


@dataclass(frozen=True)
class Cancelled:
    timestamp: int
    displayed: int
    pending: int
    type: EventType = field(default=EventType.CANCELLED, init=False)


LifecycleEvent = Union[Started, ElementDisplayed, Completed, Failed, Cancelled]


def is_terminal(event: LifecycleEvent) -> bool:
    """Return True for events that end a run."""
    return event.type in TERMINAL_EVENT_TYPES
