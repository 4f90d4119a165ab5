import asyncio
from datetime import date, timedelta

from app.services.clock import FixedClock
from app.services.reminder_store import SweepResult
from app.services.scheduler import ReminderScheduler, SchedulerState


class FakeSession:
    def __init__(self, closed):
        self.closed = closed

    def close(self):
        self.closed.append(self)


def test_failing_cycle_does_not_stop_the_loop():
    closed = []
    calls = []

    def flaky_sweep(db, clock, policy):
        calls.append(clock.today())
        if len(calls) == 1:
            raise RuntimeError("database is locked")
        return SweepResult(day=clock.today().isoformat(), birthday_reminders=1)

    scheduler = ReminderScheduler(
        lambda: FakeSession(closed),
        interval=timedelta(milliseconds=10),
        clock=FixedClock(date(2024, 6, 8)),
        sweep=flaky_sweep,
    )

    async def scenario():
        scheduler.start()
        for _ in range(500):
            if scheduler.cycles >= 3:
                break
            await asyncio.sleep(0.01)
        await scheduler.stop()

    asyncio.run(scenario())

    assert scheduler.cycles >= 3
    assert scheduler.state == SchedulerState.STOPPED
    assert not scheduler.is_running
    assert scheduler.last_result.birthday_reminders == 1
    # every cycle closes its session, including the failed one
    assert len(closed) == len(calls)


def test_stop_interrupts_the_sleep():
    scheduler = ReminderScheduler(
        lambda: FakeSession([]),
        interval=timedelta(hours=6),
        clock=FixedClock(date(2024, 6, 8)),
        sweep=lambda db, clock, policy: SweepResult(day=clock.today().isoformat()),
    )

    async def scenario():
        scheduler.start()
        while scheduler.cycles < 1:
            await asyncio.sleep(0.01)
        await asyncio.wait_for(scheduler.stop(), timeout=5)

    asyncio.run(scenario())

    assert scheduler.cycles == 1
    assert scheduler.state == SchedulerState.STOPPED


def test_stop_before_start_is_a_no_op():
    scheduler = ReminderScheduler(lambda: FakeSession([]))

    asyncio.run(scheduler.stop())

    assert scheduler.state == SchedulerState.STOPPED
    assert scheduler.cycles == 0


def test_run_once_uses_a_fresh_session():
    closed = []
    seen = []

    def sweep(db, clock, policy):
        seen.append(db)
        return SweepResult(day=clock.today().isoformat())

    scheduler = ReminderScheduler(
        lambda: FakeSession(closed),
        clock=FixedClock(date(2024, 6, 8)),
        sweep=sweep,
    )

    first = scheduler.run_once()
    scheduler.run_once()

    assert first.day == "2024-06-08"
    assert seen[0] is not seen[1]
    assert closed == seen
