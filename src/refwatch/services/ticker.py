# Directory: src/refwatch/services/ticker.py
import asyncio
import logging
import time
from typing import Callable, Optional

from refwatch.constants import DEFAULT_TICK_INTERVAL_MS

logger = logging.getLogger(__name__)


class MatchTicker:
    """
    Host-side scheduler that drives a running match clock.

    Every `interval_ms` it measures the real time since the previous tick
    and hands the delta to `session.advance_tick`, tagged with the clock
    epoch it was started under. The session drops ticks from an old epoch,
    so a tick computed before a pause or phase change is never applied.
    """

    def __init__(
        self,
        session,
        epoch: int,
        interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        time_source: Callable[[], float] = time.monotonic,
    ):
        if interval_ms <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_ms}")
        self.session = session
        self.epoch = epoch
        self.interval_ms = interval_ms
        self.time_source = time_source
        self._stopped = False
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done() and not self._stopped

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        """
        Stop scheduling ticks. Safe to call from inside a tick: the loop
        then exits after the current tick instead of cancelling itself.
        """
        self._stopped = True
        if self._task is not None and self._task is not asyncio.current_task():
            self._task.cancel()

    async def wait_stopped(self) -> None:
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    async def _run(self):
        last = self.time_source()
        while not self._stopped:
            await asyncio.sleep(self.interval_ms / 1000)
            if self._stopped:
                break

            now = self.time_source()
            delta_millis = max(0, int((now - last) * 1000))
            # carry the sub-millisecond remainder into the next tick
            last += delta_millis / 1000

            try:
                await self.session.advance_tick(delta_millis, epoch=self.epoch)
            except Exception as e:
                logger.error(f"Tick failed for epoch {self.epoch}: {e}", exc_info=True)
