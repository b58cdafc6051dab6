"""Scheduler state machine and per-run bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import threading


class SchedulerState(str, Enum):
    """Finite state machine for one scheduler run."""

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (
            SchedulerState.COMPLETED,
            SchedulerState.FAILED,
            SchedulerState.CANCELLED,
        )


@dataclass(frozen=True)
class RunSnapshot:
    """Immutable view of a run, handed to callers and completion futures."""

    state: SchedulerState
    total: int
    completed_count: int
    has_started: bool
    has_completed: bool
    failure: BaseException | None
    started_at: int | None
    finished_at: int | None


class RunState:
    """Counters and terminal flags owned by a single run.

    ``lock`` is the run's single linearization point: the scheduler holds it
    while incrementing the counter, publishing the displayed event and checking
    for completion, and for every terminal transition. It is re-entrant so
    observers may cancel the run from inside a handler.
    """

    def __init__(self, total: int) -> None:
        if total < 0:
            raise ValueError("total must be non-negative.")
        self.lock = threading.RLock()
        self.total = total
        self.completed_count = 0
        self.has_started = False
        self.has_completed = False
        self.failure: BaseException | None = None
        self.state = SchedulerState.IDLE
        self.started_at: int | None = None
        self.finished_at: int | None = None

    @property
    def pending(self) -> int:
        return self.total - self.completed_count

    def mark_started(self, now: int) -> None:
        with self.lock:
            if self.has_started:
                raise RuntimeError("Run already started.")
            self.has_started = True
            self.started_at = now
            self.state = SchedulerState.RUNNING

    def record_display(self) -> bool:
        """Count one displayed element; refused once the run is terminal."""
        with self.lock:
            if self.has_completed or self.completed_count >= self.total:
                return False
            self.completed_count += 1
            return True

    def finish(
        self,
        state: SchedulerState,
        now: int,
        failure: BaseException | None = None,
    ) -> bool:
        """Move to a terminal state; only the first call succeeds."""
        if not state.is_terminal:
            raise ValueError(f"{state} is not a terminal state.")
        with self.lock:
            if self.has_completed:
                return False
            if state is SchedulerState.COMPLETED and self.completed_count != self.total:
                return False
            self.has_completed = True
            self.state = state
            self.failure = failure
            self.finished_at = now
            return True

    def snapshot(self) -> RunSnapshot:
        with self.lock:
            return RunSnapshot(
                state=self.state,
                total=self.total,
                completed_count=self.completed_count,
                has_started=self.has_started,
                has_completed=self.has_completed,
                failure=self.failure,
                started_at=self.started_at,
                finished_at=self.finished_at,
            )
