"""Working out the next point in time that a parsed cron expression allows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from cronsched.cron_data import CronData
from cronsched.time_types import Field

_MAX_ITERATIONS = 65535
_ONE_DAY = timedelta(days=1)


class ScheduleError(RuntimeError):
    """Raised when no matching point in time can be found for a schedule."""


@dataclass(frozen=True)
class DateTime:
    """Calendar components of a point in time."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0


def to_calendar_time(time: datetime) -> DateTime:
    """Split ``time`` into its calendar components."""
    return DateTime(time.year, time.month, time.day, time.hour, time.minute, time.second)


def _start_of_day(time: datetime) -> datetime:
    return datetime(time.year, time.month, time.day, tzinfo=time.tzinfo)


def _first_of_next_month(time: datetime) -> datetime:
    if time.month == 12:
        return datetime(time.year + 1, 1, 1, tzinfo=time.tzinfo)
    return datetime(time.year, time.month + 1, 1, tzinfo=time.tzinfo)


def _sunday_based_weekday(time: datetime) -> int:
    # Sunday = 0 ... Saturday = 6
    return (time.weekday() + 1) % 7


class CronSchedule:
    """Finds the times at which a cron expression fires."""

    def __init__(self, data: CronData) -> None:
        self._data = data

    @property
    def data(self) -> CronData:
        """The parsed cron expression behind this schedule."""
        return self._data

    def _date_matches(self, curr: datetime) -> datetime | None:
        """Return ``None`` if the date of ``curr`` is allowed, else the next candidate."""
        data = self._data
        if curr.month not in data.months:
            return _first_of_next_month(curr)
        if len(data.day_of_month) != Field.DAY_OF_MONTH.last:
            if curr.day not in data.day_of_month:
                return _start_of_day(curr) + _ONE_DAY
            return None
        # All days of the month allowed (or ignored): the day of week decides.
        if _sunday_based_weekday(curr) not in data.day_of_week:
            return _start_of_day(curr) + _ONE_DAY
        return None

    def calculate_from(self, start: datetime) -> datetime:
        """Return the first allowed time at or after ``start``, whole seconds only."""
        data = self._data
        curr = start
        try:
            for _ in range(_MAX_ITERATIONS - 1):
                next_date = self._date_matches(curr)
                if next_date is not None:
                    curr = next_date
                elif curr.hour not in data.hours:
                    curr += timedelta(hours=1, minutes=-curr.minute, seconds=-curr.second)
                elif curr.minute not in data.minutes:
                    curr += timedelta(minutes=1, seconds=-curr.second)
                elif curr.second not in data.seconds:
                    curr += timedelta(seconds=1)
                else:
                    # Fractions of a second would delay the run to the next tick.
                    return curr.replace(microsecond=0)
        except OverflowError as exc:
            raise ScheduleError(f"no matching time found after {start}") from exc
        raise ScheduleError(f"no matching time found after {start}")