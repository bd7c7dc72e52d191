"""Tests for the recurring refresh loop."""

import asyncio

import pytest

from sleeperboard.scheduler import IntervalTask


class TestIntervalTask:
    """Tests for tick timing and failure handling."""

    def test_runs_max_ticks(self):
        """Test the loop stops after max_ticks."""
        calls = []

        async def callback():
            calls.append(1)

        task = IntervalTask(callback, interval=0, max_ticks=3)
        asyncio.run(task.run())
        assert len(calls) == 3
        assert task.ticks == 3

    def test_failing_tick_does_not_stop_loop(self):
        """Test an exception is logged and the next tick still runs."""
        calls = []

        async def callback():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError('upstream down')

        task = IntervalTask(callback, interval=0, max_ticks=3)
        asyncio.run(task.run())
        assert len(calls) == 3
        assert task.failures == 1

    def test_ticks_never_overlap(self):
        """Test a slow tick finishes before the next one starts."""
        active = []
        overlaps = []

        async def callback():
            if active:
                overlaps.append(1)
            active.append(1)
            await asyncio.sleep(0.02)
            active.pop()

        asyncio.run(IntervalTask(callback, interval=0.001, max_ticks=4).run())
        assert overlaps == []

    def test_stop_ends_loop(self):
        """Test stop() from inside a tick ends the loop without waiting."""
        async def main():
            task = None

            async def callback():
                task.stop()

            task = IntervalTask(callback, interval=60)
            await asyncio.wait_for(task.run(), timeout=5)
            return task

        task = asyncio.run(main())
        assert task.ticks == 1
        assert task.stopped

    def test_negative_interval_rejected(self):
        """Test a negative interval is a programming error."""
        async def callback():
            pass

        with pytest.raises(ValueError):
            IntervalTask(callback, interval=-1)
