from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

import pytest

from focuss.core.app_state import AppState
from focuss.data.storage import Storage


class ManualClock:
    def __init__(self, start: datetime) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)

    def set(self, instant: datetime) -> None:
        self.current = instant


class ManualScheduler:
    """Tick source driven by the test; counts arm calls to catch double arming."""

    def __init__(self) -> None:
        self.callback: Callable[[], None] | None = None
        self.arm_count = 0
        self.disarm_count = 0

    @property
    def is_armed(self) -> bool:
        return self.callback is not None

    def arm(self, callback: Callable[[], None]) -> None:
        self.disarm()
        self.arm_count += 1
        self.callback = callback

    def disarm(self) -> None:
        if self.callback is None:
            return
        self.disarm_count += 1
        self.callback = None

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self.callback is None:
                return
            self.callback()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(datetime(2026, 3, 10, 9, 0, 0))


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def storage(tmp_path) -> Storage:
    storage = Storage(tmp_path / "focuss.db")
    storage.init_db()
    return storage


@pytest.fixture
def state(scheduler, clock, storage) -> AppState:
    app_state = AppState(scheduler=scheduler, clock=clock)
    app_state.load_from_storage(storage)
    return app_state


def run_session(state: AppState, scheduler: ManualScheduler, clock: ManualClock, minutes: int) -> None:
    """Starts a session and lets it run to completion, advancing the clock per tick."""
    state.start()
    for _ in range(minutes * 60):
        clock.advance(seconds=1)
        scheduler.fire()


def interrupt_after(state: AppState, clock: ManualClock, minutes: float) -> None:
    state.start()
    clock.advance(minutes=minutes)
    state.interrupt()
