"""The scheduler: named tasks run whenever their cron schedules allow."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta

from cronsched.clock import CronClock, LocalClock
from cronsched.cron_data import CronData, InvalidCronExpression
from cronsched.cron_schedule import CronSchedule
from cronsched.task import Task, TaskFunction, TaskQueue

_ONE_SECOND = timedelta(seconds=1)
_THREE_HOURS = timedelta(hours=3)


class Cron:
    """Holds scheduled tasks and runs those that are due on each tick."""

    def __init__(self, clock: CronClock | None = None, thread_safe: bool = False) -> None:
        self._clock = clock if clock is not None else LocalClock()
        self._tasks = TaskQueue(thread_safe)
        self._first_tick = True
        self._last_tick = datetime.min

    @property
    def clock(self) -> CronClock:
        """The clock the scheduler reads the time from."""
        return self._clock

    def add_schedule(self, name: str, schedule: str, work: TaskFunction) -> None:
        """Add a task; raise InvalidCronExpression if ``schedule`` is not valid."""
        data = CronData.create(schedule)
        with self._tasks.locked():
            task = Task(name, CronSchedule(data), work)
            if task.calculate_next(self._clock.now()):
                self._tasks.push(task)
                self._tasks.sort()

    def add_schedules(self, schedules: Mapping[str, str], work: TaskFunction) -> None:
        """Add one task per name and schedule, or none at all if any schedule is invalid."""
        to_add: list[Task] = []
        for name, schedule in schedules.items():
            try:
                data = CronData.create(schedule)
            except InvalidCronExpression as exc:
                raise InvalidCronExpression(
                    f"schedule {name!r} is invalid: {schedule!r}"
                ) from exc
            task = Task(name, CronSchedule(data), work)
            if task.calculate_next(self._clock.now()):
                to_add.append(task)

        if to_add:
            with self._tasks.locked():
                self._tasks.extend(to_add)
                self._tasks.sort()

    def clear_schedules(self) -> None:
        """Remove every task."""
        self._tasks.clear()

    def remove_schedule(self, name: str) -> None:
        """Remove the task called ``name``, if there is one."""
        self._tasks.remove(name)

    def __len__(self) -> int:
        return len(self._tasks)

    def tick(self, now: datetime | None = None) -> int:
        """Run every task that is due; return how many ran.

        Call at least once a second so that no schedule is missed.
        """
        if now is None:
            now = self._clock.now()

        with self._tasks.locked():
            if self._first_tick:
                self._first_tick = False
            else:
                diff = now - self._last_tick
                if -_ONE_SECOND < diff < _ONE_SECOND:
                    # Time only moves once a full second has passed, either way.
                    now = self._last_tick
                elif abs(diff) >= _THREE_HOURS:
                    # A jump of three hours or more is a clock or timezone
                    # correction: the new time is used straight away.
                    for task in self._tasks:
                        task.calculate_next(now)

            self._last_tick = now

            executed = 0
            for task in self._tasks:
                if task.is_expired(now):
                    task.execute(now)
                    if not task.calculate_next(now + _ONE_SECOND):
                        self._tasks.remove(task.name)
                    executed += 1

            if executed:
                self._tasks.sort()
            return executed

    def time_until_next(self) -> timedelta:
        """Time until the soonest task is due; ``timedelta.max`` when there are none."""
        if not len(self._tasks):
            return timedelta.max
        return self._tasks.top().time_until_expiry(self._clock.now())

    def recalculate_schedule(self) -> None:
        """Work out every task's next run again, strictly after the current time."""
        start = self._clock.now() + _ONE_SECOND
        for task in self._tasks:
            task.calculate_next(start)

    def time_until_expiry_for_tasks(self) -> list[tuple[str, timedelta]]:
        """Each task's name with the time left until it is due, in queue order."""
        now = self._clock.now()
        return [(task.name, task.time_until_expiry(now)) for task in self._tasks]

    def __str__(self) -> str:
        now = self._clock.now()
        return "".join(f"{task.status(now)}\n" for task in self._tasks)