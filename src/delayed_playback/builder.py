"""Fluent helper assembling a scheduler, its bus, observers and inputs.

Usage:
    playback = (
        PlaybackBuilder()
        .with_elements([30, 10, 20])
        .with_strategy("identity")
        .with_observers(EventLogger(), StatisticsCollector())
        .build()
    )
    playback.start()
    await playback.scheduler.wait()
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .config import PlaybackConfig
from .events.bus import EventBus
from .exceptions import PlaybackError
from .scheduler import DisplayHook, Scheduler
from .strategies import DelayStrategy, StrategyRegistry, get_registry
from .timer import Timer


@dataclass(frozen=True)
class Playback:
    """A fully assembled, not yet started run."""

    scheduler: Scheduler
    bus: EventBus
    elements: tuple[Any, ...]
    strategy: DelayStrategy
    observers: tuple[Any, ...]

    def start(self) -> None:
        self.scheduler.start(self.elements, self.strategy)


class PlaybackBuilder:
    def __init__(self, registry: StrategyRegistry | None = None) -> None:
        self._registry = registry
        self._elements: tuple[Any, ...] | None = None
        self._strategy: DelayStrategy | str | None = None
        self._observers: list[Any] = []
        self._config: PlaybackConfig | None = None
        self._timer: Timer | None = None
        self._display: DisplayHook | None = None
        self._bus: EventBus | None = None

    def with_elements(self, elements: Iterable[Any]) -> PlaybackBuilder:
        if isinstance(elements, (str, bytes)):
            raise TypeError("elements must be a non-string iterable.")
        self._elements = tuple(elements)
        return self

    def with_strategy(self, strategy: DelayStrategy | str) -> PlaybackBuilder:
        self._strategy = strategy
        return self

    def with_observer(self, observer: Any) -> PlaybackBuilder:
        if observer is None:
            raise TypeError("observer must not be None.")
        self._observers.append(observer)
        return self

    def with_observers(self, *observers: Any) -> PlaybackBuilder:
        for observer in observers:
            self.with_observer(observer)
        return self

    def with_config(self, config: PlaybackConfig) -> PlaybackBuilder:
        self._config = config
        return self

    def with_timer(self, timer: Timer) -> PlaybackBuilder:
        self._timer = timer
        return self

    def with_display(self, display: DisplayHook) -> PlaybackBuilder:
        self._display = display
        return self

    def with_bus(self, bus: EventBus) -> PlaybackBuilder:
        self._bus = bus
        return self

    def _resolve_strategy(self) -> DelayStrategy:
        strategy = self._strategy
        if strategy is None and self._config is not None:
            strategy = self._config.default_strategy
        if strategy is None:
            raise PlaybackError("A delay strategy is required.")
        if isinstance(strategy, str):
            return (self._registry or get_registry()).create(strategy)
        return strategy

    def build(self) -> Playback:
        if self._elements is None:
            raise PlaybackError("Elements are required before build().")
        strategy = self._resolve_strategy()
        bus = self._bus if self._bus is not None else EventBus()
        for observer in self._observers:
            bus.attach(observer)
        scheduler = Scheduler(
            bus,
            timer=self._timer,
            config=self._config,
            display=self._display,
        )
        return Playback(
            scheduler=scheduler,
            bus=bus,
            elements=self._elements,
            strategy=strategy,
            observers=tuple(self._observers),
        )
