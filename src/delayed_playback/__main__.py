"""CLI entrypoint for delayed-playback."""

from __future__ import annotations

import argparse
import asyncio
from importlib import metadata
from pathlib import Path
from typing import Any, Sequence

from rich.console import Console
from rich.table import Table

from .builder import PlaybackBuilder
from .config import load_config
from .exceptions import PlaybackError, SchedulingFailure
from .logging_utils import configure_logging
from .observers import EventLogger, HistoryRecorder, RunStatistics, StatisticsCollector
from .state import SchedulerState
from .strategies import get_registry

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="delayed-playback",
        description="Display each element after a delay derived from the element.",
    )
    parser.add_argument("elements", nargs="*", help="Elements to play back")
    parser.add_argument("--strategy", help="Delay strategy id (default from config)")
    parser.add_argument("--config", type=Path, help="Path to a TOML config file")
    parser.add_argument("--quiet", action="store_true", help="Mute the event log")
    parser.add_argument(
        "--list-strategies",
        action="store_true",
        help="Print the available delay strategies and exit",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    return parser


def parse_element(raw: str) -> Any:
    """Turn a CLI token into an int, a float, or leave it as text."""
    for convert in (int, float):
        try:
            return convert(raw)
        except ValueError:
            continue
    return raw


def _statistics_table(stats: RunStatistics) -> Table:
    table = Table(title="Playback statistics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Displayed elements", str(stats.displayed_elements))
    table.add_row("Total delay (ms)", f"{stats.total_delay:g}")
    table.add_row("Average delay (ms)", f"{stats.average_delay:g}")
    table.add_row("Duration (ms)", "-" if stats.duration is None else str(stats.duration))
    for kind, count in stats.event_counts.items():
        table.add_row(f"{kind.value} events", str(count))
    return table


async def _run(playback_builder: PlaybackBuilder) -> SchedulerState:
    playback = playback_builder.build()
    playback.start()
    try:
        await playback.scheduler.wait()
    except SchedulingFailure:
        pass
    return playback.scheduler.state


def main(argv: Sequence[str] | None = None) -> int:
    """Load config, run one playback to its end, and print a summary."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = Console()

    if args.version:
        try:
            version = metadata.version("delayed-playback")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        console.print(f"delayed-playback {version}", highlight=False)
        return EXIT_OK

    registry = get_registry()
    if args.list_strategies:
        for strategy_id in registry.ids():
            strategy = registry.create(strategy_id)
            console.print(f"{strategy_id}: {strategy.get_description()}", highlight=False)
        return EXIT_OK

    config = load_config(args.config)
    configure_logging(config.logging.model_dump())

    event_logger = EventLogger(
        config.playback,
        sink=lambda line: console.print(line, markup=False, highlight=False),
        muted=args.quiet,
    )
    statistics = StatisticsCollector()
    builder = (
        PlaybackBuilder(registry)
        .with_elements(parse_element(raw) for raw in args.elements)
        .with_strategy(args.strategy or config.playback.default_strategy)
        .with_config(config.playback)
        .with_observers(event_logger, statistics, HistoryRecorder())
    )

    try:
        final_state = asyncio.run(_run(builder))
    except PlaybackError as exc:
        console.print(f"error: {exc}", markup=False, highlight=False)
        return EXIT_USAGE

    console.print(_statistics_table(statistics.get_statistics()))
    return EXIT_OK if final_state is SchedulerState.COMPLETED else EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
