"""Unit tests for view-scoped timers."""

import asyncio

import pytest

from deploy_console.core.exceptions import ViewClosedError
from deploy_console.core.messages import MessageBoard
from deploy_console.core.timers import Countdown, OneShotTimer, PeriodicTimer, TimerScope


class TestCountdown:
    """Tests for Countdown."""

    @pytest.mark.asyncio
    async def test_tick_decrements_by_one(self):
        countdown = Countdown(interval=60)
        countdown.start(3)

        assert countdown.tick() == 2
        assert countdown.tick() == 1
        assert countdown.tick() == 0
        countdown.cancel()

    def test_never_goes_below_zero(self):
        countdown = Countdown()
        assert countdown.tick() == 0
        assert countdown.remaining == 0

    @pytest.mark.asyncio
    async def test_runs_down_and_stops(self):
        ticks: list[int] = []
        countdown = Countdown(interval=0.001, on_tick=ticks.append)

        countdown.start(3)
        await asyncio.sleep(0.1)

        assert ticks == [2, 1, 0]
        assert countdown.remaining == 0
        assert countdown.running is False

    @pytest.mark.asyncio
    async def test_restart_replaces_running_countdown(self):
        countdown = Countdown(interval=60)
        countdown.start(5)
        first = countdown._task

        countdown.start(60)

        assert countdown.remaining == 60
        await asyncio.sleep(0)
        assert first.cancelled()
        countdown.cancel()

    @pytest.mark.asyncio
    async def test_start_at_zero_does_not_run(self):
        countdown = Countdown()
        countdown.start(0)
        assert countdown.running is False


class TestOneShotTimer:
    """Tests for OneShotTimer."""

    @pytest.mark.asyncio
    async def test_fires_once(self):
        fired: list[str] = []
        timer = OneShotTimer()

        timer.arm(0.001, lambda: fired.append("x"))
        await asyncio.sleep(0.05)

        assert fired == ["x"]
        assert timer.armed is False

    @pytest.mark.asyncio
    async def test_rearm_replaces(self):
        fired: list[str] = []
        timer = OneShotTimer()

        timer.arm(0.001, lambda: fired.append("first"))
        timer.arm(0.001, lambda: fired.append("second"))
        await asyncio.sleep(0.05)

        assert fired == ["second"]


class TestPeriodicTimer:
    """Tests for PeriodicTimer."""

    @pytest.mark.asyncio
    async def test_keeps_running_after_callback_error(self):
        calls = 0

        async def callback():
            nonlocal calls
            calls += 1
            raise RuntimeError("boom")

        timer = PeriodicTimer(0.001, callback)
        timer.start()
        await asyncio.sleep(0.05)
        timer.cancel()

        assert calls > 1
        assert timer.running is False


class TestTimerScope:
    """Tests for TimerScope."""

    @pytest.mark.asyncio
    async def test_close_cancels_timers(self):
        scope = TimerScope("view")
        countdown = scope.countdown(interval=60)
        one_shot = scope.one_shot()
        countdown.start(60)
        one_shot.arm(60, lambda: None)

        scope.close()

        assert countdown.running is False
        assert one_shot.armed is False

    @pytest.mark.asyncio
    async def test_run_returns_result(self):
        scope = TimerScope("view")

        async def work():
            return 42

        assert await scope.run(work()) == 42
        assert scope.pending == 0

    @pytest.mark.asyncio
    async def test_run_after_close_raises(self):
        scope = TimerScope("view")
        scope.close()

        async def work():
            return 42

        with pytest.raises(ViewClosedError):
            await scope.run(work())

    @pytest.mark.asyncio
    async def test_close_interrupts_pending_work(self):
        scope = TimerScope("view")
        started = asyncio.Event()

        async def work():
            started.set()
            await asyncio.sleep(60)

        waiter = asyncio.create_task(scope.run(work()))
        await started.wait()
        scope.close()

        with pytest.raises(ViewClosedError):
            await waiter


class TestMessageBoard:
    """Tests for transient messages."""

    @pytest.mark.asyncio
    async def test_message_clears_after_ttl(self):
        board = MessageBoard("view", OneShotTimer(), ttl=0.01)

        board.show_error("Invalid URL")
        assert board.error == "Invalid URL"
        assert board.success == ""

        await asyncio.sleep(0.05)
        assert board.current is None

    @pytest.mark.asyncio
    async def test_new_message_restarts_clock(self):
        board = MessageBoard("view", OneShotTimer(), ttl=0.2)

        board.show_error("first")
        await asyncio.sleep(0.15)
        board.show_success("second")
        await asyncio.sleep(0.1)

        assert board.success == "second"

    @pytest.mark.asyncio
    async def test_clear_dismisses(self):
        board = MessageBoard("view", OneShotTimer(), ttl=5)
        board.show_error("oops")
        board.clear()
        assert board.current is None
