from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, List

import pytest

from lab_central.catalog import build_initial_equipment
from lab_central.data_models import Requester
from lab_central.store import LabStore
from lab_central.system import LabCentralSystem

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that only moves when a test tells it to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@dataclass
class ManualTimer:
    when: float
    func: Callable
    args: tuple
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """Stand-in for TimerScheduler; callbacks fire only on ``advance``."""

    time: float = 0.0
    timers: List[ManualTimer] = field(default_factory=list)
    cancel_all_calls: int = 0

    def schedule(self, seconds: float, func: Callable, *args) -> ManualTimer:
        timer = ManualTimer(self.time + seconds, func, args)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        target = self.time + seconds
        while True:
            due = [t for t in self.timers if not t.cancelled and t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self.timers.remove(timer)
            self.time = timer.when
            timer.func(*timer.args)
        self.time = target

    def pending(self) -> List[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]

    def cancel_all(self) -> None:
        self.cancel_all_calls += 1
        for timer in self.timers:
            timer.cancel()
        self.timers.clear()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def store():
    store = LabStore(url="sqlite://", seed=build_initial_equipment())
    yield store
    store.dispose()


@pytest.fixture
def system(store, scheduler, clock) -> LabCentralSystem:
    return LabCentralSystem(store=store, scheduler=scheduler, clock=clock)


@pytest.fixture
def requester() -> Requester:
    return Requester(user_id="u-researcher", name="Dhanuprabu J", department="Nanotechnology")
