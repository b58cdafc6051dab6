"""FIFO queue deferring playback starts until the caller replays them."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging

from .builder import Playback

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackCommand:
    """Deferred ``start()`` of one assembled playback."""

    playback: Playback
    label: str = ""

    def execute(self) -> None:
        self.playback.start()


class CommandQueue:
    """Plain call deferral: commands run in the order they were enqueued."""

    def __init__(self) -> None:
        self._pending: deque[PlaybackCommand] = deque()
        self.history: list[PlaybackCommand] = []

    def __len__(self) -> int:
        return len(self._pending)

    def enqueue(self, command: PlaybackCommand) -> None:
        self._pending.append(command)

    def execute_next(self) -> PlaybackCommand | None:
        """Run the oldest command; errors propagate and the command is not recorded."""
        if not self._pending:
            return None
        command = self._pending.popleft()
        command.execute()
        self.history.append(command)
        LOGGER.debug(
            "commands.executed",
            extra={"event": "commands.executed", "label": command.label},
        )
        return command

    def execute_all(self) -> int:
        executed = 0
        while self._pending:
            self.execute_next()
            executed += 1
        return executed

    def clear(self) -> None:
        self._pending.clear()
