"""Clocks and cancelable timers.

Gesture handling needs two timing primitives: "what day is today" for
placement validation, and "run this later unless cancelled" for the
post-drop commit delay and the resize debounce. Both are injected so the
engine runs against real time in the service and against a logical clock in
tests.

- Clock / SystemClock / ManualClock: current date and a monotonic reading
- TimerHandle: a scheduled callback that can be cancelled
- TimerScheduler: schedule(fn, delay) -> TimerHandle
- ThreadingTimerScheduler: real timers backed by threading.Timer
- ManualTimerScheduler: timers fired by advancing a ManualClock
"""

import heapq
import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Clock(ABC):
    """Source of the current local date and a monotonic time reading."""

    @abstractmethod
    def today(self) -> date:
        """Return the current local calendar day."""

    @abstractmethod
    def monotonic(self) -> float:
        """Return a monotonic reading in seconds."""


class SystemClock(Clock):
    """Wall-clock implementation."""

    def today(self) -> date:
        return date.today()

    def monotonic(self) -> float:
        return time.monotonic()


class ManualClock(Clock):
    """A clock that only moves when told to.

    Args:
        current: The starting local datetime.
    """

    def __init__(self, current: datetime) -> None:
        self.current = current
        self._elapsed = 0.0

    def today(self) -> date:
        return self.current.date()

    def monotonic(self) -> float:
        return self._elapsed

    def advance(self, seconds: float) -> None:
        """Move the clock forward.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError("seconds must be non-negative")
        self._elapsed += seconds
        self.current = self.current + timedelta(seconds=seconds)

    def set_date(self, day: date) -> None:
        """Jump to midnight of a specific day without firing timers."""
        self.current = datetime(day.year, day.month, day.day)


class TimerHandle(ABC):
    """A pending callback returned by TimerScheduler.schedule()."""

    @abstractmethod
    def cancel(self) -> bool:
        """Cancel the callback.

        Returns:
            True if the callback had not run yet and will now never run.
        """

    @property
    @abstractmethod
    def is_pending(self) -> bool:
        """Whether the callback is still waiting to run."""


class TimerScheduler(ABC):
    """Schedules callbacks to run after a delay."""

    @abstractmethod
    def schedule(self, callback: Callable[[], None], delay: float) -> TimerHandle:
        """Run callback once after delay seconds.

        Args:
            callback: Zero-argument function to run.
            delay: Seconds to wait (must be >= 0).

        Returns:
            A handle that can cancel the callback.
        """

    def shutdown(self) -> None:
        """Cancel everything still pending."""


class _ThreadingHandle(TimerHandle):
    def __init__(self, delay: float, fire: Callable[["_ThreadingHandle"], None]) -> None:
        self._timer = threading.Timer(delay, fire, args=(self,))
        self._timer.daemon = True
        self._done = threading.Event()

    def start(self) -> None:
        self._timer.start()

    def cancel(self) -> bool:
        if self._done.is_set():
            return False
        self._timer.cancel()
        self._done.set()
        return True

    @property
    def is_pending(self) -> bool:
        return not self._done.is_set()


class ThreadingTimerScheduler(TimerScheduler):
    """Real timers, each running on a daemon threading.Timer."""

    def __init__(self) -> None:
        self._handles: set[_ThreadingHandle] = set()
        self._lock = threading.Lock()

    def schedule(self, callback: Callable[[], None], delay: float) -> TimerHandle:
        if delay < 0:
            raise ValueError("delay must be non-negative")

        def run(handle: _ThreadingHandle) -> None:
            if handle._done.is_set():
                return
            handle._done.set()
            with self._lock:
                self._handles.discard(handle)
            try:
                callback()
            except Exception as e:
                # Log but don't crash the timer thread
                logger.error(f"Error in scheduled callback: {e}", exc_info=True)

        handle = _ThreadingHandle(delay, run)
        with self._lock:
            self._handles.add(handle)
        handle.start()
        return handle

    def shutdown(self) -> None:
        with self._lock:
            handles = list(self._handles)
            self._handles.clear()
        for handle in handles:
            handle.cancel()


class _ManualHandle(TimerHandle):
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> bool:
        if self.cancelled or self.fired:
            return False
        self.cancelled = True
        return True

    @property
    def is_pending(self) -> bool:
        return not (self.cancelled or self.fired)


class ManualTimerScheduler(TimerScheduler):
    """Deterministic timers driven by a ManualClock.

    Callbacks only run inside advance(), in due-time order (ties in
    scheduling order), and on the calling thread.

    Args:
        clock: The logical clock the timers are measured against.
    """

    def __init__(self, clock: Optional[ManualClock] = None) -> None:
        self.clock = clock or ManualClock(datetime(2000, 1, 1))
        self._queue: list[tuple[float, int, _ManualHandle]] = []
        self._counter = itertools.count()

    def schedule(self, callback: Callable[[], None], delay: float) -> TimerHandle:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        handle = _ManualHandle(self.clock.monotonic() + delay, callback)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle))
        return handle

    @property
    def pending_count(self) -> int:
        """Number of callbacks still waiting to fire."""
        return sum(1 for _, _, handle in self._queue if handle.is_pending)

    def advance(self, seconds: float) -> int:
        """Advance the clock and fire every callback that comes due.

        Args:
            seconds: How far to move the clock.

        Returns:
            Number of callbacks fired.
        """
        target = self.clock.monotonic() + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.is_pending:
                continue
            self.clock.advance(max(0.0, due - self.clock.monotonic()))
            handle.fired = True
            handle.callback()
            fired += 1
        self.clock.advance(max(0.0, target - self.clock.monotonic()))
        return fired

    def shutdown(self) -> None:
        for _, _, handle in self._queue:
            handle.cancel()
        self._queue.clear()
