"""Observer aggregating per-run metrics."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..events.domain import (
    ElementDisplayed,
    EventType,
    LifecycleEvent,
    Started,
    is_terminal,
)


@dataclass(frozen=True)
class RunStatistics:
    """Snapshot returned by :meth:`StatisticsCollector.get_statistics`."""

    displayed_elements: int
    total_delay: float
    average_delay: float
    min_delay: float | None
    max_delay: float | None
    start_timestamp: int | None
    end_timestamp: int | None
    duration: int | None
    finished: bool
    event_counts: dict[EventType, int] = field(default_factory=dict)


class StatisticsCollector:
    """Count displayed elements and delays, and time the run.

    ``duration`` is only reported once a terminal event (completed, failed or
    cancelled) has been observed.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Zero every counter; safe to call between runs."""
        self.displayed_count = 0
        self.total_delay = 0.0
        self.min_delay: float | None = None
        self.max_delay: float | None = None
        self.event_counts: dict[EventType, int] = {kind: 0 for kind in EventType}
        self.start_timestamp: int | None = None
        self.end_timestamp: int | None = None

    def on_event(self, event: LifecycleEvent) -> None:
        self.event_counts[event.type] += 1

        if isinstance(event, Started):
            self.start_timestamp = event.timestamp
            self.end_timestamp = None
        elif isinstance(event, ElementDisplayed):
            self.displayed_count += 1
            self.total_delay += event.delay
            if self.min_delay is None or event.delay < self.min_delay:
                self.min_delay = event.delay
            if self.max_delay is None or event.delay > self.max_delay:
                self.max_delay = event.delay
        elif is_terminal(event):
            self.end_timestamp = event.timestamp

    def get_statistics(self) -> RunStatistics:
        finished = self.start_timestamp is not None and self.end_timestamp is not None
        duration = (
            self.end_timestamp - self.start_timestamp  # type: ignore[operator]
            if finished
            else None
        )
        average = self.total_delay / self.displayed_count if self.displayed_count else 0.0
        return RunStatistics(
            displayed_elements=self.displayed_count,
            total_delay=self.total_delay,
            average_delay=average,
            min_delay=self.min_delay,
            max_delay=self.max_delay,
            start_timestamp=self.start_timestamp,
            end_timestamp=self.end_timestamp,
            duration=duration,
            finished=finished,
            event_counts=dict(self.event_counts),
        )
