"""Unit tests for the clock and timer abstractions."""

import threading
from datetime import date, datetime

import pytest

from models.timers import ManualClock, ManualTimerScheduler, ThreadingTimerScheduler


class TestManualClock:
    def test_today_and_advance(self):
        clock = ManualClock(datetime(2025, 1, 1, 23, 59, 59))
        clock.advance(2)
        assert clock.today() == date(2025, 1, 2)
        assert clock.monotonic() == 2

    def test_negative_advance(self):
        with pytest.raises(ValueError):
            ManualClock(datetime(2025, 1, 1)).advance(-1)

    def test_set_date(self):
        clock = ManualClock(datetime(2025, 1, 1))
        clock.set_date(date(2025, 3, 4))
        assert clock.today() == date(2025, 3, 4)


class TestManualTimerScheduler:
    def test_fires_in_due_order(self):
        scheduler = ManualTimerScheduler()
        fired = []
        scheduler.schedule(lambda: fired.append("late"), 0.2)
        scheduler.schedule(lambda: fired.append("early"), 0.1)
        scheduler.schedule(lambda: fired.append("early-2"), 0.1)

        assert scheduler.advance(0.15) == 2
        assert fired == ["early", "early-2"]
        assert scheduler.advance(1) == 1
        assert fired == ["early", "early-2", "late"]

    def test_cancel(self):
        scheduler = ManualTimerScheduler()
        fired = []
        handle = scheduler.schedule(lambda: fired.append(1), 0.1)
        assert handle.cancel() is True
        assert handle.cancel() is False
        assert not handle.is_pending
        assert scheduler.advance(1) == 0
        assert fired == []

    def test_pending_count(self):
        scheduler = ManualTimerScheduler()
        scheduler.schedule(lambda: None, 0.1)
        handle = scheduler.schedule(lambda: None, 0.1)
        handle.cancel()
        assert scheduler.pending_count == 1

    def test_shutdown_cancels_all(self):
        scheduler = ManualTimerScheduler()
        handle = scheduler.schedule(lambda: None, 0.1)
        scheduler.shutdown()
        assert not handle.is_pending
        assert scheduler.advance(1) == 0

    def test_negative_delay(self):
        with pytest.raises(ValueError):
            ManualTimerScheduler().schedule(lambda: None, -0.1)

    def test_callback_sees_advanced_clock(self):
        clock = ManualClock(datetime(2025, 1, 1))
        scheduler = ManualTimerScheduler(clock)
        seen = []
        scheduler.schedule(lambda: seen.append(clock.monotonic()), 0.5)
        scheduler.advance(2)
        assert seen == [0.5]
        assert clock.monotonic() == 2


class TestThreadingTimerScheduler:
    def test_runs_callback(self):
        scheduler = ThreadingTimerScheduler()
        done = threading.Event()
        handle = scheduler.schedule(done.set, 0.01)
        assert done.wait(timeout=2)
        assert not handle.is_pending

    def test_cancel_prevents_run(self):
        scheduler = ThreadingTimerScheduler()
        done = threading.Event()
        handle = scheduler.schedule(done.set, 0.5)
        assert handle.cancel() is True
        assert not done.wait(timeout=0.7)

    def test_callback_errors_are_contained(self):
        scheduler = ThreadingTimerScheduler()
        done = threading.Event()

        def boom():
            done.set()
            raise RuntimeError("boom")

        scheduler.schedule(boom, 0.01)
        assert done.wait(timeout=2)
        scheduler.shutdown()

    def test_shutdown_cancels_pending(self):
        scheduler = ThreadingTimerScheduler()
        done = threading.Event()
        handle = scheduler.schedule(done.set, 0.5)
        scheduler.shutdown()
        assert not handle.is_pending
        assert not done.wait(timeout=0.7)
