"""Tests for the debounce scheduler and live tone monitor."""

from __future__ import annotations

import asyncio

import pytest

from toneguard.scoring.debounce import (
    AsyncioScheduler,
    Debouncer,
    LiveToneMonitor,
    VirtualClock,
)

RESIGNED = "Fine, whatever you say. I guess I'll just do it."


class TestVirtualClock:
    def test_runs_callbacks_in_time_order(self):
        clock = VirtualClock()
        fired: list[str] = []
        clock.call_later(0.2, lambda: fired.append("b"))
        clock.call_later(0.1, lambda: fired.append("a"))
        clock.advance(0.15)
        assert fired == ["a"]
        clock.advance(0.1)
        assert fired == ["a", "b"]
        assert clock.now == pytest.approx(0.25)

    def test_cancelled_callbacks_do_not_run(self):
        clock = VirtualClock()
        fired: list[int] = []
        handle = clock.call_later(0.1, lambda: fired.append(1))
        assert clock.pending == 1
        handle.cancel()
        assert clock.pending == 0
        clock.advance(1)
        assert fired == []


class TestDebouncer:
    def test_fires_once_after_quiet_period(self):
        clock = VirtualClock()
        calls: list[str] = []
        debouncer = Debouncer(calls.append, scheduler=clock, delay=0.3)

        debouncer.trigger("a")
        clock.advance(0.1)
        debouncer.trigger("ab")
        clock.advance(0.1)
        debouncer.trigger("abc")
        clock.advance(0.29)
        assert calls == []
        assert debouncer.pending

        clock.advance(0.02)
        assert calls == ["abc"]
        assert not debouncer.pending

    def test_cancel(self):
        clock = VirtualClock()
        calls: list[str] = []
        debouncer = Debouncer(calls.append, scheduler=clock, delay=0.3)
        debouncer.trigger("x")
        debouncer.cancel()
        clock.advance(1)
        assert calls == []

    def test_flush_runs_immediately(self):
        clock = VirtualClock()
        calls: list[str] = []
        debouncer = Debouncer(calls.append, scheduler=clock, delay=0.3)
        debouncer.trigger("now")
        debouncer.flush()
        assert calls == ["now"]
        clock.advance(1)
        assert calls == ["now"]

    def test_flush_without_pending_is_noop(self):
        calls: list[str] = []
        Debouncer(calls.append, scheduler=VirtualClock()).flush()
        assert calls == []


class TestLiveToneMonitor:
    def test_scores_after_300ms(self):
        clock = VirtualClock()
        emitted: list[list] = []
        monitor = LiveToneMonitor(emitted.append, scheduler=clock)

        monitor.update(RESIGNED[:20])
        clock.advance(0.2)
        monitor.update(RESIGNED)
        clock.advance(0.29)
        assert emitted == []

        clock.advance(0.02)
        assert len(emitted) == 1
        assert emitted[0][0].label == "Passive-Agg"
        assert monitor.last_scores == emitted[0]

    def test_short_text_clears_immediately(self):
        clock = VirtualClock()
        emitted: list[list] = []
        monitor = LiveToneMonitor(emitted.append, scheduler=clock)

        monitor.update(RESIGNED)
        monitor.update("hi")
        assert emitted == [[]]
        assert not monitor.pending
        clock.advance(1)
        assert emitted == [[]]

    def test_custom_delay(self):
        clock = VirtualClock()
        emitted: list[list] = []
        monitor = LiveToneMonitor(emitted.append, scheduler=clock, delay_ms=500)
        monitor.update(RESIGNED)
        clock.advance(0.3)
        assert emitted == []
        clock.advance(0.25)
        assert len(emitted) == 1

    def test_flush(self):
        emitted: list[list] = []
        monitor = LiveToneMonitor(emitted.append, scheduler=VirtualClock())
        monitor.update(RESIGNED)
        monitor.flush()
        assert len(emitted) == 1


class TestAsyncioScheduler:
    @pytest.mark.asyncio
    async def test_debounces_on_event_loop(self):
        emitted: list[list] = []
        monitor = LiveToneMonitor(
            emitted.append, scheduler=AsyncioScheduler(), delay_ms=20,
        )
        monitor.update(RESIGNED)
        monitor.update(RESIGNED + " ")
        assert emitted == []
        await asyncio.sleep(0.1)
        assert len(emitted) == 1
