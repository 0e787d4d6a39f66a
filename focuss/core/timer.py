from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from focuss import config
from focuss.core.clock import Clock, SystemClock
from focuss.core.scheduler import TickScheduler

logger = logging.getLogger(__name__)

# (session_started_at, configured_length_seconds)
FinalizeCallback = Callable[[datetime | None, int], None]


class TimerPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class TimerSnapshot:
    phase: TimerPhase
    total_seconds: int
    remaining_seconds: int
    session_started_at: datetime | None
    quick_test_mode: bool

    @property
    def elapsed_seconds(self) -> int:
        return self.total_seconds - self.remaining_seconds

    @property
    def progress(self) -> float:
        if self.total_seconds <= 0:
            return 0.0
        return max(0.0, min(1.0, self.elapsed_seconds / self.total_seconds))


class FocusTimer:
    """Countdown engine: one decrement per scheduler tick, detached from the UI."""

    def __init__(
        self,
        scheduler: TickScheduler,
        clock: Clock | None = None,
        length_seconds: int = config.DEFAULT_SESSION_MINUTES * 60,
        on_finished: FinalizeCallback | None = None,
        on_interrupted: FinalizeCallback | None = None,
        on_tick: Callable[[TimerSnapshot], None] | None = None,
    ) -> None:
        if length_seconds <= 0:
            raise ValueError("Session length must be positive")
        self._scheduler = scheduler
        self._clock = clock or SystemClock()
        self._length_sec = length_seconds
        self._quick_test_mode = False
        self._phase = TimerPhase.IDLE
        self._run_total_sec = length_seconds
        self._remaining_sec = length_seconds
        self._session_started_at: datetime | None = None
        self.on_finished = on_finished
        self.on_interrupted = on_interrupted
        self.on_tick = on_tick

    @property
    def phase(self) -> TimerPhase:
        return self._phase

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_sec

    @property
    def session_started_at(self) -> datetime | None:
        return self._session_started_at

    @property
    def quick_test_mode(self) -> bool:
        return self._quick_test_mode

    @property
    def is_active(self) -> bool:
        return self._phase in {TimerPhase.RUNNING, TimerPhase.PAUSED}

    @property
    def configured_seconds(self) -> int:
        """Length the next session will run: quick-test length overrides the preferred one."""
        if self._quick_test_mode:
            return config.QUICK_TEST_MINUTES * 60
        return self._length_sec

    def configure(self, length_seconds: int) -> None:
        if length_seconds <= 0:
            raise ValueError("Session length must be positive")
        self._length_sec = length_seconds
        if self._phase == TimerPhase.IDLE:
            self._reload()

    def set_quick_test_mode(self, enabled: bool) -> None:
        self._quick_test_mode = enabled
        if self._phase == TimerPhase.IDLE:
            self._reload()

    def start(self) -> bool:
        if self._phase == TimerPhase.IDLE:
            self._reload()
            self._session_started_at = self._clock.now()
        elif self._phase != TimerPhase.PAUSED:
            return False
        self._phase = TimerPhase.RUNNING
        self._scheduler.arm(self.tick)
        logger.debug("Timer running, %d s left", self._remaining_sec)
        return True

    def pause(self) -> bool:
        if self._phase != TimerPhase.RUNNING:
            return False
        self._scheduler.disarm()
        self._phase = TimerPhase.PAUSED
        logger.debug("Timer paused at %d s", self._remaining_sec)
        return True

    def reset(self) -> None:
        self._scheduler.disarm()
        self._session_started_at = None
        self._reload()
        self._phase = TimerPhase.IDLE

    def interrupt(self) -> bool:
        if not self.is_active:
            return False
        self._scheduler.disarm()
        started_at = self._session_started_at
        length = self._run_total_sec
        try:
            if self.on_interrupted is not None:
                self.on_interrupted(started_at, length)
        finally:
            self.reset()
        return True

    def tick(self) -> TimerSnapshot:
        if self._phase != TimerPhase.RUNNING:
            return self.snapshot()

        self._remaining_sec = max(0, self._remaining_sec - 1)
        if self._remaining_sec > 0:
            current = self.snapshot()
            if self.on_tick is not None:
                self.on_tick(current)
            return current

        self._scheduler.disarm()
        self._phase = TimerPhase.FINISHED
        finished = self.snapshot()
        logger.debug("Timer finished after %d s", finished.total_seconds)
        try:
            if self.on_finished is not None:
                self.on_finished(finished.session_started_at, finished.total_seconds)
        finally:
            self.reset()
        if self.on_tick is not None:
            self.on_tick(self.snapshot())
        return finished

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            phase=self._phase,
            total_seconds=self._run_total_sec,
            remaining_seconds=self._remaining_sec,
            session_started_at=self._session_started_at,
            quick_test_mode=self._quick_test_mode,
        )

    def _reload(self) -> None:
        self._run_total_sec = self.configured_seconds
        self._remaining_sec = self._run_total_sec
