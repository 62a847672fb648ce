"""Timers for widgets.

Widgets never touch a real clock directly; they get a ``Scheduler`` at
construction. ``ManualClock`` is a virtual clock advanced explicitly, which
is what the CLI and the tests use. ``LoopScheduler`` runs timers on an
asyncio event loop for hosts that have one.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Any, Callable, Protocol

Callback = Callable[[], Any]


class TimerHandle:
    """Cancellable reference to a scheduled callback."""

    def __init__(self, callback: Callback, interval: float | None = None) -> None:
        self.callback = callback
        self.interval = interval
        self._cancelled = False
        self._inner: asyncio.TimerHandle | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self._cancelled = True
        if self._inner is not None:
            self._inner.cancel()
            self._inner = None


class Scheduler(Protocol):
    def now(self) -> float:
        ...

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        ...

    def call_every(self, interval: float, callback: Callback) -> TimerHandle:
        ...


def _check_interval(interval: float) -> None:
    if interval <= 0:
        raise ValueError(f"interval must be > 0, got {interval!r}")


class ManualClock:
    """Virtual clock: timers fire only when ``advance`` is called."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._queue: list[tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle(callback)
        self._push(self._now + max(0.0, delay), handle)
        return handle

    def call_every(self, interval: float, callback: Callback) -> TimerHandle:
        _check_interval(interval)
        handle = TimerHandle(callback, interval=interval)
        self._push(self._now + interval, handle)
        return handle

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> int:
        """Move time forward, firing due timers in order. Returns fired count."""
        if seconds < 0:
            raise ValueError("cannot move a clock backwards")
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = when
            if handle.repeating:
                self._push(when + handle.interval, handle)
            handle.callback()
            fired += 1
        self._now = target
        return fired

    def _push(self, when: float, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, (when, next(self._seq), handle))


class LoopScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        # Without an explicit loop this must first be used inside a running one.
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle(callback)

        def _fire() -> None:
            handle._inner = None
            if not handle.cancelled:
                callback()

        handle._inner = self.loop.call_later(max(0.0, delay), _fire)
        return handle

    def call_every(self, interval: float, callback: Callback) -> TimerHandle:
        _check_interval(interval)
        handle = TimerHandle(callback, interval=interval)

        def _tick() -> None:
            if handle.cancelled:
                return
            handle._inner = self.loop.call_later(interval, _tick)
            callback()

        handle._inner = self.loop.call_later(interval, _tick)
        return handle
