"""Clocks that tell the scheduler what time it is."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CronClock(ABC):
    """A source of the current time, as a naive datetime."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time."""

    @abstractmethod
    def utc_offset(self, now: datetime) -> timedelta:
        """Return the offset from UTC in effect at the UTC time ``now``."""


class UTCClock(CronClock):
    """A clock that tells UTC time."""

    def now(self) -> datetime:
        return _utc_now()

    def utc_offset(self, now: datetime) -> timedelta:
        return timedelta(0)


class LocalClock(CronClock):
    """A clock that tells the local wall-clock time."""

    def now(self) -> datetime:
        utc = _utc_now()
        return utc + self.utc_offset(utc)

    def utc_offset(self, now: datetime) -> timedelta:
        stamp = now.replace(tzinfo=timezone.utc).timestamp()
        return timedelta(seconds=time.localtime(stamp).tm_gmtoff)