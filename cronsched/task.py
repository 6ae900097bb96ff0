"""Scheduled tasks and the queue that holds them."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager, nullcontext
from datetime import datetime, timedelta
from typing import ContextManager

from cronsched.cron_schedule import CronSchedule, ScheduleError, to_calendar_time

_ONE_SECOND = timedelta(seconds=1)
_EPOCH = datetime(1970, 1, 1)


class TaskInformation(ABC):
    """What a running task may learn about itself."""

    @property
    @abstractmethod
    def delay(self) -> timedelta:
        """How late the current run started compared with its planned time."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The task's name."""


TaskFunction = Callable[[TaskInformation], None]


class Task(TaskInformation):
    """A named piece of work run at the times a cron schedule allows."""

    def __init__(self, name: str, schedule: CronSchedule, work: TaskFunction) -> None:
        self._name = name
        self._schedule = schedule
        self._work = work
        self._next_schedule = _EPOCH
        self._delay = -_ONE_SECOND
        self._valid = False
        self._last_run = datetime.min

    @property
    def name(self) -> str:
        return self._name

    @property
    def delay(self) -> timedelta:
        return self._delay

    @property
    def next_schedule(self) -> datetime:
        """The next time the task is due."""
        return self._next_schedule

    @property
    def valid(self) -> bool:
        """Whether a next run time could be calculated."""
        return self._valid

    def execute(self, now: datetime) -> None:
        """Run the work, recording how late it started."""
        self._delay = now - self._next_schedule
        self._last_run = now
        self._work(self)

    def calculate_next(self, start: datetime) -> bool:
        """Work out the next run at or after ``start``; False if there is none."""
        try:
            self._next_schedule = self._schedule.calculate_from(start)
        except ScheduleError:
            # A task whose next run cannot be found never expires again.
            self._valid = False
            return False
        self._valid = True
        self._last_run = self._next_schedule - _ONE_SECOND
        return True

    def is_expired(self, now: datetime) -> bool:
        """Tell whether the task is due to run at ``now``."""
        return (
            self._valid
            and now >= self._last_run
            and self.time_until_expiry(now) == timedelta(0)
        )

    def time_until_expiry(self, now: datetime) -> timedelta:
        """Time left until the next run, never negative."""
        if now >= self._next_schedule:
            return timedelta(0)
        return self._next_schedule - now

    def status(self, now: datetime) -> str:
        """A one-line description of when the task next runs."""
        millis = self.time_until_expiry(now) // timedelta(milliseconds=1)
        dt = to_calendar_time(self._next_schedule)
        return (
            f"'{self._name}' expires in {millis}ms => "
            f"{dt.year}-{dt.month}-{dt.day} {dt.hour}:{dt.minute}:{dt.second}"
        )

    def __lt__(self, other: Task) -> bool:
        return self._next_schedule < other._next_schedule

    def __gt__(self, other: Task) -> bool:
        return self._next_schedule > other._next_schedule

    def __repr__(self) -> str:
        return f"Task({self._name!r}, next={self._next_schedule!s})"


class TaskQueue:
    """Tasks ordered by their next run, optionally guarded by a reentrant lock."""

    def __init__(self, thread_safe: bool = False) -> None:
        self._lock: ContextManager[object] = (
            threading.RLock() if thread_safe else nullcontext()
        )
        self._tasks: list[Task] = []

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def push(self, task: Task) -> None:
        """Append one task."""
        self._tasks.append(task)

    def extend(self, tasks: Iterable[Task]) -> None:
        """Append several tasks."""
        self._tasks.extend(tasks)

    def top(self) -> Task:
        """The first task; after sorting, the one due soonest."""
        if not self._tasks:
            raise IndexError("the task queue is empty")
        return self._tasks[0]

    def sort(self) -> None:
        """Order the tasks by their next run."""
        self._tasks.sort(key=lambda task: task.next_schedule)

    def clear(self) -> None:
        """Remove every task."""
        with self._lock:
            self._tasks.clear()

    def remove(self, name: str) -> None:
        """Remove the first task called ``name``, if there is one."""
        with self._lock:
            for index, task in enumerate(self._tasks):
                if task.name == name:
                    del self._tasks[index]
                    return

    @contextmanager
    def locked(self) -> Iterator[TaskQueue]:
        """Hold the queue's lock for the duration of the block."""
        with self._lock:
            yield self