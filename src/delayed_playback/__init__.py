"""Top-level package for delayed-playback."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .builder import Playback, PlaybackBuilder
    from .commands import CommandQueue, PlaybackCommand
    from .config import Config, PlaybackConfig, load_config
    from .events import EventBus, EventType
    from .exceptions import (
        EmptyInputError,
        InvalidElementError,
        ObserverFailure,
        PlaybackError,
        SchedulerStateError,
        SchedulingFailure,
        UnknownStrategyError,
    )
    from .observers import EventLogger, HistoryRecorder, StatisticsCollector
    from .scheduler import Scheduler
    from .state import SchedulerState
    from .strategies import DelayStrategy, StrategyRegistry, get_registry
    from .timer import AsyncioTimer, ManualTimer, ThreadingTimer

_EXPORTS: dict[str, str] = {
    "Playback": ".builder",
    "PlaybackBuilder": ".builder",
    "CommandQueue": ".commands",
    "PlaybackCommand": ".commands",
    "Config": ".config",
    "PlaybackConfig": ".config",
    "load_config": ".config",
    "EventBus": ".events",
    "EventType": ".events",
    "EmptyInputError": ".exceptions",
    "InvalidElementError": ".exceptions",
    "ObserverFailure": ".exceptions",
    "PlaybackError": ".exceptions",
    "SchedulerStateError": ".exceptions",
    "SchedulingFailure": ".exceptions",
    "UnknownStrategyError": ".exceptions",
    "EventLogger": ".observers",
    "HistoryRecorder": ".observers",
    "StatisticsCollector": ".observers",
    "Scheduler": ".scheduler",
    "SchedulerState": ".state",
    "DelayStrategy": ".strategies",
    "StrategyRegistry": ".strategies",
    "get_registry": ".strategies",
    "AsyncioTimer": ".timer",
    "ManualTimer": ".timer",
    "ThreadingTimer": ".timer",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> Any:
    """Lazily import public symbols so ``import delayed_playback`` stays cheap."""
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)
