"""Observer that turns lifecycle events into log lines."""

from __future__ import annotations

from collections.abc import Callable
import logging

from ..config import PlaybackConfig
from ..events.domain import (
    Cancelled,
    Completed,
    ElementDisplayed,
    Failed,
    LifecycleEvent,
    Started,
)

LOGGER = logging.getLogger(__name__)

Sink = Callable[[str], None]


def describe(event: LifecycleEvent) -> str:
    """Human readable text for one event, without prefix or timestamp."""
    if isinstance(event, Started):
        return f"Starting playback of {event.total} element(s)"
    if isinstance(event, ElementDisplayed):
        return f"#{event.index}: {event.element!r} (after {event.delay:g} ms)"
    if isinstance(event, Completed):
        return f"Playback completed: {event.displayed}/{event.total} displayed"
    if isinstance(event, Failed):
        where = f" at element {event.index}" if event.index is not None else ""
        return f"Playback failed{where}: {event.error}"
    if isinstance(event, Cancelled):
        return f"Playback cancelled: {event.displayed} displayed, {event.pending} pending"
    return f"Unknown event {event!r}"


class EventLogger:
    """Format every event as one line and hand it to a sink.

    The config is read on every event, so toggling ``logging_enabled`` or
    changing the prefix mid-run changes what is printed from then on. The
    default sink writes INFO records to this module's logger.
    """

    def __init__(
        self,
        config: PlaybackConfig | None = None,
        sink: Sink | None = None,
        muted: bool = False,
    ) -> None:
        self.config = config if config is not None else PlaybackConfig()
        self._sink = sink
        self.muted = muted
        self.lines_emitted = 0

    def mute(self) -> None:
        self.muted = True

    def unmute(self) -> None:
        self.muted = False

    def format(self, event: LifecycleEvent) -> str:
        prefix = self.config.log_prefix
        stamp = f"[{event.timestamp}] " if self.config.timestamps_enabled else ""
        return f"{prefix}{stamp}{describe(event)}"

    def on_event(self, event: LifecycleEvent) -> None:
        if self.muted or not self.config.logging_enabled:
            return
        try:
            line = self.format(event)
            if self._sink is not None:
                self._sink(line)
            else:
                LOGGER.info(line, extra={"event": f"playback.{event.type.value}"})
            self.lines_emitted += 1
        except Exception as exc:  # noqa: BLE001 - a logger must never break delivery.
            LOGGER.debug(f"Event logger could not emit line: {exc}")
