"""Background task that runs the reminder sweep on a fixed interval."""
import asyncio
import logging
from collections.abc import Callable
from datetime import timedelta
from enum import Enum

from sqlalchemy.orm import Session

from app.services.clock import Clock, SystemClock
from app.services.reminder_store import SweepResult, run_reminder_sweep
from app.services.reminders import ReminderPolicy

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class ReminderScheduler:
    """Runs one sweep, sleeps for ``interval``, repeats until stopped.

    Cycles never overlap: the sleep only starts once a cycle has finished.
    A failing cycle is logged and the loop carries on at the next tick.
    Each cycle gets its own session from ``session_factory``.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        interval: timedelta = timedelta(hours=6),
        clock: Clock | None = None,
        policy: ReminderPolicy | None = None,
        sweep: Callable[..., SweepResult] = run_reminder_sweep,
    ):
        self.session_factory = session_factory
        self.interval = interval
        self.clock = clock or SystemClock()
        self.policy = policy
        self.sweep = sweep
        self.state = SchedulerState.IDLE
        self.cycles = 0
        self.last_result: SweepResult | None = None
        self._task: asyncio.Task | None = None
        self._stopping: asyncio.Event | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> SweepResult:
        """Run one full sweep synchronously on a fresh session."""
        db = self.session_factory()
        try:
            result = self.sweep(db, self.clock, self.policy)
        finally:
            db.close()
        self.last_result = result
        return result

    def start(self) -> None:
        if self.is_running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="reminder-scheduler")

    async def stop(self) -> None:
        """Signal shutdown and wait for any in-flight cycle to finish."""
        if self._task is None:
            self.state = SchedulerState.STOPPED
            return
        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        logger.info(f"Reminder scheduler started (interval {self.interval})")
        while not self._stopping.is_set():
            self.state = SchedulerState.RUNNING
            try:
                result = await asyncio.to_thread(self.run_once)
                logger.info(f"Reminder sweep completed: {result.as_dict()}")
            except Exception:
                logger.exception("Error in reminder sweep")
            finally:
                self.cycles += 1
                self.state = SchedulerState.IDLE

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval.total_seconds())
            except asyncio.TimeoutError:
                pass

        self.state = SchedulerState.STOPPED
        logger.info("Reminder scheduler stopped")
