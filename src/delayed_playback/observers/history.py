"""Observer capturing every event in delivery order."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
import threading

from ..events.domain import ElementDisplayed, EventType, LifecycleEvent


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class HistoryEntry:
    sequence: int
    event: LifecycleEvent
    received_at: datetime


class HistoryRecorder:
    """Append-only log of events, in the order the bus delivered them.

    Delivery order is what the history reveals: displayed events show up in
    the order their timers fired, not in index order.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _utc_now
        self._entries: list[HistoryEntry] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def on_event(self, event: LifecycleEvent) -> None:
        received_at = self._clock()
        with self._lock:
            self._entries.append(HistoryEntry(len(self._entries), event, received_at))

    def get_history(self) -> tuple[HistoryEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def events_of(self, event_type: EventType) -> list[LifecycleEvent]:
        return [entry.event for entry in self.get_history() if entry.event.type == event_type]

    def displayed_indices(self) -> list[int]:
        """Indices of displayed elements in delivery order."""
        return [
            entry.event.index
            for entry in self.get_history()
            if isinstance(entry.event, ElementDisplayed)
        ]
