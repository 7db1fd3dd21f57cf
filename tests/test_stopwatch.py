"""Test the session stopwatch."""

from datetime import timedelta

import pytest
from splitmark.events import ScheduleTick, TickEvent
from splitmark.keyboard import KeyEvent, KeyType
from splitmark.stopwatch import Stopwatch, format_duration


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.mark.parametrize("seconds, expected", [
    (0, "0s"),
    (0.9, "0s"),
    (45, "45s"),
    (90, "1m30s"),
    (3600, "1h0m0s"),
    (7205, "2h0m5s"),
])
def test_format_duration(seconds, expected):
    assert format_duration(timedelta(seconds=seconds)) == expected


def test_starts_at_zero():
    stopwatch = Stopwatch(clock=FakeClock())
    stopwatch.start()
    assert stopwatch.elapsed() == timedelta(0)
    assert stopwatch.view() == "0s"


def test_init_schedules_first_tick():
    assert Stopwatch(interval=1.0).init() == [ScheduleTick(1.0)]


def test_tick_advances_and_reschedules():
    clock = FakeClock()
    stopwatch = Stopwatch(interval=1.0, clock=clock)
    stopwatch.start()
    clock.now += 90
    assert stopwatch.update(TickEvent()) == [ScheduleTick(1.0)]
    assert stopwatch.view() == "1m30s"


def test_reading_only_changes_on_tick():
    clock = FakeClock()
    stopwatch = Stopwatch(clock=clock)
    stopwatch.start()
    clock.now += 5
    assert stopwatch.view() == "0s"
    stopwatch.update(KeyEvent(key_type=KeyType.REGULAR, value='a'))
    assert stopwatch.view() == "0s"
    stopwatch.update(TickEvent())
    assert stopwatch.view() == "5s"


def test_elapsed_is_monotonic():
    clock = FakeClock()
    stopwatch = Stopwatch(clock=clock)
    stopwatch.start()
    readings = []
    for step in [3, 2, -4, 7, -1, 0, 1]:
        clock.now += step
        stopwatch.update(TickEvent())
        readings.append(stopwatch.elapsed())
    assert readings == sorted(readings)


def test_ticks_before_start_do_nothing():
    stopwatch = Stopwatch(clock=FakeClock())
    assert not stopwatch.running
    assert stopwatch.update(TickEvent()) == []
