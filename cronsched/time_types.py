"""Cron fields and the limits of the values they accept."""

from __future__ import annotations

from enum import Enum

MONTH_NAMES: tuple[str, ...] = (
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
)
DAY_NAMES: tuple[str, ...] = ("SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT")

FEBRUARY = 2
MONTHS_WITH_31: frozenset[int] = frozenset({1, 3, 5, 7, 8, 10, 12})


class Field(Enum):
    """One of the six fields of a cron expression."""

    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAY_OF_MONTH = "day of month"
    MONTHS = "months"
    DAY_OF_WEEK = "day of week"

    @property
    def first(self) -> int:
        """Lowest value allowed in this field."""
        return _LIMITS[self][0]

    @property
    def last(self) -> int:
        """Highest value allowed in this field."""
        return _LIMITS[self][1]

    def contains(self, value: int) -> bool:
        """Tell whether ``value`` lies within the field's limits."""
        return self.first <= value <= self.last

    def __str__(self) -> str:
        return self.value


_LIMITS: dict[Field, tuple[int, int]] = {
    Field.SECONDS: (0, 59),
    Field.MINUTES: (0, 59),
    Field.HOURS: (0, 23),
    Field.DAY_OF_MONTH: (1, 31),
    Field.MONTHS: (1, 12),
    # Sunday = 0 ... Saturday = 6
    Field.DAY_OF_WEEK: (0, 6),
}