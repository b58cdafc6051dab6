"""Built-in observers: logging, statistics and history capture."""

from .history import HistoryEntry, HistoryRecorder
from .logger import EventLogger, describe
from .statistics import RunStatistics, StatisticsCollector

__all__ = [
    "EventLogger",
    "HistoryEntry",
    "HistoryRecorder",
    "RunStatistics",
    "StatisticsCollector",
    "describe",
]
