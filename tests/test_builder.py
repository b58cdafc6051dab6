"""Tests for the fluent playback builder."""

from __future__ import annotations

import unittest

from delayed_playback.builder import PlaybackBuilder
from delayed_playback.config import PlaybackConfig
from delayed_playback.events import EventBus, EventType
from delayed_playback.exceptions import PlaybackError, UnknownStrategyError
from delayed_playback.observers import HistoryRecorder, StatisticsCollector
from delayed_playback.strategies import (
    ConstantDelayStrategy,
    LengthDelayStrategy,
    StrategyRegistry,
)
from delayed_playback.timer import ManualTimer


class PlaybackBuilderTests(unittest.TestCase):
    """Validate assembly of scheduler, bus and observers."""

    def test_build_and_run_with_strategy_id(self) -> None:
        timer = ManualTimer()
        history = HistoryRecorder()
        stats = StatisticsCollector()
        playback = (
            PlaybackBuilder()
            .with_elements([30, 10, 20])
            .with_strategy("identity")
            .with_observers(history, stats)
            .with_timer(timer)
            .build()
        )
        self.assertEqual(playback.elements, (30, 10, 20))
        self.assertEqual(playback.observers, (history, stats))
        self.assertEqual(playback.bus.observers, (history, stats))

        playback.start()
        timer.run_all()
        self.assertEqual(history.displayed_indices(), [1, 2, 0])
        self.assertEqual(stats.get_statistics().total_delay, 60)

    def test_strategy_instance_and_custom_registry(self) -> None:
        registry = StrategyRegistry()
        registry.register("words", LengthDelayStrategy(unit=1))
        playback = (
            PlaybackBuilder(registry)
            .with_elements(["ccc", "a", "bb"])
            .with_strategy("words")
            .with_timer(ManualTimer())
            .build()
        )
        self.assertIsInstance(playback.strategy, LengthDelayStrategy)

        direct = ConstantDelayStrategy(3)
        playback = (
            PlaybackBuilder(registry)
            .with_elements([1])
            .with_strategy(direct)
            .build()
        )
        self.assertIs(playback.strategy, direct)

    def test_default_strategy_comes_from_config(self) -> None:
        playback = (
            PlaybackBuilder()
            .with_elements([1])
            .with_config(PlaybackConfig(default_strategy="constant"))
            .build()
        )
        self.assertEqual(playback.strategy.get_name(), "constant")

    def test_shared_bus_and_display_hook(self) -> None:
        timer = ManualTimer()
        bus = EventBus()
        history = HistoryRecorder()
        bus.attach(history)
        shown: list[int] = []
        playback = (
            PlaybackBuilder()
            .with_bus(bus)
            .with_elements([2, 1])
            .with_strategy("identity")
            .with_display(lambda element, index: shown.append(element))
            .with_timer(timer)
            .build()
        )
        self.assertIs(playback.bus, bus)
        playback.start()
        timer.run_all()
        self.assertEqual(shown, [1, 2])
        self.assertEqual(history.events_of(EventType.COMPLETED)[0].displayed, 2)

    def test_missing_parts_are_rejected(self) -> None:
        with self.assertRaises(PlaybackError):
            PlaybackBuilder().with_strategy("identity").build()
        with self.assertRaises(PlaybackError):
            PlaybackBuilder().with_elements([1]).build()
        with self.assertRaises(UnknownStrategyError):
            PlaybackBuilder().with_elements([1]).with_strategy("nope").build()
        with self.assertRaises(TypeError):
            PlaybackBuilder().with_elements("abc")
        with self.assertRaises(TypeError):
            PlaybackBuilder().with_observer(None)


if __name__ == "__main__":
    unittest.main()
