"""Turning cron expressions with random ranges, ``R(a-b)``, into fixed ones."""

from __future__ import annotations

import random
import re
from collections.abc import Iterable

from cronsched.cron_data import (
    SIX_PARTS,
    InvalidCronExpression,
    parse_range,
    replace_names_with_numbers,
)
from cronsched.time_types import FEBRUARY, MONTHS_WITH_31, Field

_RANDOM = re.compile(r"[rR]\(([0-9]+)-([0-9]+)\)")


class RandomizationError(InvalidCronExpression):
    """Raised when a randomized cron expression cannot be resolved."""


def _day_limits(months: Iterable[int]) -> tuple[int, int]:
    """The range of days that exists in every one of ``months``."""
    highest = Field.DAY_OF_MONTH.last
    for month in months:
        if month == FEBRUARY:
            # Limited to 29, possibly delaying the schedule until a leap year.
            highest = min(highest, 29)
        elif month not in MONTHS_WITH_31:
            highest = min(highest, 30)
    return Field.DAY_OF_MONTH.first, highest


class CronRandomization:
    """Picks a random value for every ``R(a-b)`` section of a cron expression."""

    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed)

    def parse(self, schedule: str) -> str:
        """Return ``schedule`` with each random section replaced by one chosen value."""
        match = SIX_PARTS.fullmatch(schedule)
        if not match:
            raise RandomizationError(f"expected six parts in {schedule!r}")

        sec, minute, hour, dom, month, dow = match.groups()
        month = replace_names_with_numbers(month, Field.MONTHS)
        dow = replace_names_with_numbers(dow, Field.DAY_OF_WEEK)

        working = " ".join((sec, minute, hour, dom, month, dow))
        match = SIX_PARTS.fullmatch(working)
        if not match:
            raise RandomizationError(f"expected six parts in {working!r}")
        sec, minute, hour, dom, month, dow = match.groups()

        second_text, _ = self._pick(sec, Field.SECONDS)
        minute_text, _ = self._pick(minute, Field.MINUTES)
        hour_text, _ = self._pick(hour, Field.HOURS)

        # The month goes first so that the day of month can be capped to it.
        month_text, month_value = self._pick(month, Field.MONTHS)
        if month_value is None:
            try:
                month_range = parse_range(month, Field.MONTHS)
            except InvalidCronExpression as exc:
                raise RandomizationError(f"invalid month section {month!r}") from exc
        else:
            month_range = {month_value}

        dom_text, _ = self._pick(dom, Field.DAY_OF_MONTH, _day_limits(month_range))
        dow_text, _ = self._pick(dow, Field.DAY_OF_WEEK)

        return " ".join(
            (second_text, minute_text, hour_text, dom_text, month_text, dow_text)
        )

    def _pick(
        self,
        section: str,
        field: Field,
        limits: tuple[int, int] | None = None,
    ) -> tuple[str, int | None]:
        match = _RANDOM.fullmatch(section)
        if not match:
            return section, None

        left, right = int(match[1]), int(match[2])
        if limits is not None:
            low, high = limits
            left = max(min(left, high), low)
            right = max(min(right, high), low)

        try:
            numbers = parse_range(f"{left}-{right}", field)
        except InvalidCronExpression as exc:
            raise RandomizationError(
                f"invalid random range {section!r} for {field}"
            ) from exc

        if limits is not None:
            low, high = limits
            numbers = {n for n in numbers if low <= n <= high}
        if not numbers:
            raise RandomizationError(f"random range {section!r} allows no {field}")

        value = self._random.choice(sorted(numbers))
        return str(value), value