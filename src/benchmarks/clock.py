"""
Cooperative timer queues used to drive the benchmark scheduler.

Both implementations expose the same two calls, ``now()`` in seconds and
``call_later(delay, callback)`` returning a handle with ``cancel()``.
:py:class:`AsyncioTimers` runs on a real event loop; :py:class:`VirtualClock`
keeps its own time and only moves when advanced, which makes runs
deterministic and instantaneous.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Timers(Protocol):
    """Minimal timer interface consumed by the scheduler and workloads."""

    def now(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioTimers:
    """Timers backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_later(max(delay, 0.0), callback)


class VirtualTimerHandle:
    """Handle for a callback queued on a :py:class:`VirtualClock`."""

    __slots__ = ("when", "callback", "cancelled")

    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualClock:
    """
    Heap-ordered timer queue with manually advanced time.

    Callbacks due at the same instant fire in the order they were scheduled.
    Exceptions raised by a callback propagate out of :py:meth:`advance`.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: List[Tuple[float, int, VirtualTimerHandle]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> VirtualTimerHandle:
        handle = VirtualTimerHandle(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (handle.when, next(self._sequence), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of queued callbacks that have not been cancelled."""

        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def _pop_due(self, deadline: float) -> Optional[VirtualTimerHandle]:
        while self._queue and self._queue[0][0] <= deadline:
            _, _, handle = heapq.heappop(self._queue)
            if not handle.cancelled:
                return handle
        return None

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every callback that falls due."""

        if seconds < 0:
            raise ValueError("cannot move a clock backwards")
        deadline = self._now + seconds
        while True:
            handle = self._pop_due(deadline)
            if handle is None:
                break
            self._now = handle.when
            handle.callback()
        self._now = deadline

    def run_until(self, predicate: Callable[[], bool], timeout: float) -> bool:
        """
        Fire callbacks in order until ``predicate()`` holds or ``timeout``
        seconds of virtual time pass. Returns the final predicate value.
        """

        deadline = self._now + timeout
        while not predicate():
            handle = self._pop_due(deadline)
            if handle is None:
                self._now = deadline
                return predicate()
            self._now = handle.when
            handle.callback()
        return True
