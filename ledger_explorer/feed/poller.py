"""
Auto-refresh timer for the total transaction count.

Two states: Running (initial) and Paused. While running, a timer task sleeps
for the poll interval and then triggers a refetch. pause() cancels the timer
task; resume() triggers one immediate refetch and starts a fresh timer task,
so the schedule never drifts across pauses.

Refetches are de-duplicated: while one is in flight, every further trigger
(timer tick or resume) joins it instead of starting another.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from ledger_explorer.config.env import DEFAULT_POLL_INTERVAL_MS
from ledger_explorer.explorer_logging import get_logger

logger = get_logger(__name__)

STATE_RUNNING = "running"
STATE_PAUSED = "paused"

SleepFn = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class PollState:
    paused: bool
    interval_ms: int

    @property
    def name(self) -> str:
        return STATE_PAUSED if self.paused else STATE_RUNNING


class PollScheduler:
    """
    Periodically calls refetch() unless paused.

    sleep is injectable so tests can drive ticks by hand instead of waiting on
    the wall clock; it defaults to asyncio.sleep.
    """

    def __init__(
        self,
        refetch: Callable[[], Awaitable[Any]],
        *,
        interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        sleep: SleepFn | None = None,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._refetch = refetch
        self._interval_ms = interval_ms
        self._sleep = sleep or asyncio.sleep
        self._paused = False
        self._timer: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None
        self.refetch_count = 0

    @property
    def state(self) -> PollState:
        return PollState(paused=self._paused, interval_ms=self._interval_ms)

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def interval_sec(self) -> float:
        return self._interval_ms / 1000.0

    @property
    def inflight(self) -> asyncio.Task | None:
        """The refetch currently in flight, if any."""
        if self._inflight is not None and not self._inflight.done():
            return self._inflight
        return None

    @property
    def is_fetching(self) -> bool:
        return self.inflight is not None

    def start(self) -> None:
        """Start the timer if running and not already started. Needs a running loop."""
        if self._paused or (self._timer is not None and not self._timer.done()):
            return
        self._timer = asyncio.create_task(self._run_timer())
        logger.debug("poll_timer_started", interval_ms=self._interval_ms)

    async def stop(self) -> None:
        """Cancel the timer and wait for any in-flight refetch to settle."""
        self._cancel_timer()
        if self.inflight is not None:
            await asyncio.gather(self._inflight, return_exceptions=True)
        logger.debug("poll_stopped")

    def pause(self) -> None:
        """Running -> Paused. Cancels further timer-driven refetches; no fetch is forced."""
        if self._paused:
            return
        self._paused = True
        self._cancel_timer()
        logger.info("poll_paused", message="Auto-refresh paused")

    def resume(self) -> asyncio.Task | None:
        """
        Paused -> Running. Triggers one immediate refetch, then restarts the timer.

        Returns the refetch task (shared with any refetch already in flight), or
        None when the scheduler was not paused.
        """
        if not self._paused:
            return None
        self._paused = False
        task = self.trigger()
        self.start()
        logger.info(
            "poll_resumed",
            message=f"Auto-refreshing on - every {self._interval_ms // 1000} seconds",
        )
        return task

    def trigger(self) -> asyncio.Task:
        """Refetch now, or join the refetch already in flight."""
        if self.inflight is not None:
            logger.debug("poll_refetch_joined")
            return self._inflight
        self.refetch_count += 1
        self._inflight = asyncio.create_task(self._guarded_refetch())
        return self._inflight

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _guarded_refetch(self) -> None:
        try:
            await self._refetch()
        except Exception as e:
            # Refetch owners record their own error state; keep polling
            logger.warning("poll_refetch_failed", error=str(e))

    async def _run_timer(self) -> None:
        while not self._paused:
            await self._sleep(self.interval_sec)
            if self._paused:
                break
            # Shield so cancelling the timer never cancels a shared refetch
            await asyncio.shield(self.trigger())
