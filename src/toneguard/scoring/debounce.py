"""Debounced live tone scoring.

The quick scorer is cheap but should not run on every keystroke. Work is
scheduled through a small Scheduler interface so the quiet period can be
driven by the asyncio loop in production and by a VirtualClock in tests.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from collections.abc import Callable
from typing import Any, Protocol

from toneguard.scoring.models import QuickScore
from toneguard.scoring.quick import MIN_TEXT_LENGTH, quick_scores

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.3


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall: ...


class AsyncioScheduler:
    """Schedules callbacks on the running event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class _VirtualHandle:
    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualClock:
    """Deterministic scheduler: time only moves when advance() is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, _VirtualHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> _VirtualHandle:
        handle = _VirtualHandle(self.now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> None:
        """Move time forward, running due callbacks in order."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self.now = when
            if not handle.cancelled:
                handle.callback()
        self.now = target


class Debouncer:
    """Runs callback once input has been quiet for delay seconds."""

    def __init__(
        self,
        callback: Callable[..., Any],
        *,
        scheduler: Scheduler,
        delay: float = DEFAULT_DELAY_SECONDS,
    ):
        self._callback = callback
        self._scheduler = scheduler
        self._delay = delay
        self._handle: ScheduledCall | None = None
        self._args: tuple = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, *args: Any) -> None:
        """Restart the quiet period with the latest arguments."""
        self.cancel()
        self._args = args
        self._handle = self._scheduler.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Run the pending call now, if any."""
        if self._handle is None:
            return
        self.cancel()
        self._callback(*self._args)

    def _fire(self) -> None:
        self._handle = None
        self._callback(*self._args)


class LiveToneMonitor:
    """Feeds text edits into the quick scorer behind a debounce."""

    def __init__(
        self,
        on_scores: Callable[[list[QuickScore]], None],
        *,
        scheduler: Scheduler,
        delay_ms: int = 300,
        min_chars: int = MIN_TEXT_LENGTH,
    ):
        self._on_scores = on_scores
        self._min_chars = min_chars
        self._debouncer = Debouncer(
            self._compute, scheduler=scheduler, delay=delay_ms / 1000.0,
        )
        self.last_scores: list[QuickScore] = []

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def update(self, text: str) -> None:
        if not text.strip() or len(text) < self._min_chars:
            self._debouncer.cancel()
            self._emit([])
            return
        self._debouncer.trigger(text)

    def cancel(self) -> None:
        self._debouncer.cancel()

    def flush(self) -> None:
        """Score the pending text now instead of waiting out the delay."""
        self._debouncer.flush()

    def _compute(self, text: str) -> None:
        scores = quick_scores(text)
        logger.debug("Live tone: %d indicator(s) for %d chars", len(scores), len(text))
        self._emit(scores)

    def _emit(self, scores: list[QuickScore]) -> None:
        self.last_scores = scores
        self._on_scores(scores)
