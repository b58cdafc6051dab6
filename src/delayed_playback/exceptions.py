"""Domain exception hierarchy for delayed playback runs."""

from __future__ import annotations

from typing import Any


class PlaybackError(RuntimeError):
    """Base class for all playback errors."""


class EmptyInputError(PlaybackError, ValueError):
    """Raised when a run is started with no elements."""


class InvalidElementError(PlaybackError, ValueError):
    """Raised when an element cannot be mapped to a valid delay."""

    def __init__(self, message: str, *, index: int | None = None, element: Any = None) -> None:
        super().__init__(message)
        self.index = index
        self.element = element


class UnknownStrategyError(PlaybackError, LookupError):
    """Raised when no delay strategy is registered under the requested id."""

    def __init__(self, strategy_id: str, known: list[str] | None = None) -> None:
        self.strategy_id = strategy_id
        self.known = sorted(known or [])
        available = ", ".join(self.known) or "none"
        super().__init__(f"Unknown delay strategy {strategy_id!r} (available: {available})")


class ObserverFailure(PlaybackError):
    """An observer raised while handling an event.

    Never raised to publishers; instances are handed to the bus error channel.
    """

    def __init__(self, observer: Any, event: Any, original: BaseException) -> None:
        self.observer = observer
        self.event = event
        self.original = original
        super().__init__(
            f"Observer {observer!r} failed on {getattr(event, 'type', event)}: {original}"
        )


class SchedulingFailure(PlaybackError):
    """A per-element callback could not complete its work."""

    def __init__(self, index: int, element: Any, original: BaseException) -> None:
        self.index = index
        self.element = element
        self.original = original
        super().__init__(f"Displaying element {index} ({element!r}) failed: {original}")


class SchedulerStateError(PlaybackError):
    """Raised when a scheduler is started outside of its idle state."""


class ConfigValidationError(PlaybackError):
    """Raised when configuration cannot be validated safely."""
