"""Recurring refresh ticks on the event loop."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger('sleeperboard.scheduler')


class IntervalTask:
    """
    Run ``callback`` every ``interval`` seconds until stopped.

    Ticks never overlap: the wait for the next tick starts only after the
    previous callback has finished. A tick that raises is logged and the
    loop carries on with the next one.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        interval: float,
        max_ticks: Optional[int] = None,
        name: str = 'refresh',
    ):
        if interval < 0:
            raise ValueError(f'interval must be >= 0, got {interval}')
        self.callback = callback
        self.interval = interval
        self.max_ticks = max_ticks
        self.name = name
        self.ticks = 0
        self.failures = 0
        self._stopped = asyncio.Event()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def stop(self) -> None:
        """Finish the current tick (if any) and exit the loop."""
        self._stopped.set()

    async def tick(self) -> None:
        self.ticks += 1
        try:
            await self.callback()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.failures += 1
            logger.error(f'{self.name} tick {self.ticks} failed: {e}')

    async def run(self) -> None:
        """Tick immediately, then once per interval."""
        logger.debug(f'Starting {self.name} loop every {self.interval}s')
        while not self.stopped:
            await self.tick()
            if self.max_ticks is not None and self.ticks >= self.max_ticks:
                break
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        logger.debug(f'{self.name} loop stopped after {self.ticks} ticks ({self.failures} failed)')
