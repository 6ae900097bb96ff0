"""Parsing of cron expressions into the sets of values each field allows."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar

from cronsched.time_types import (
    DAY_NAMES,
    FEBRUARY,
    MONTH_NAMES,
    MONTHS_WITH_31,
    Field,
)


class InvalidCronExpression(ValueError):
    """Raised when a cron expression or one of its parts cannot be parsed."""


_CONVENIENCE = (
    ("@yearly", "0 0 1 1 *"),
    ("@annually", "0 0 1 1 *"),
    ("@monthly", "0 0 1 * *"),
    ("@weekly", "0 0 * * 0"),
    ("@daily", "0 0 * * *"),
    ("@hourly", "0 * * * *"),
)

SIX_PARTS = re.compile(r"\s*(.*?)\s+(.*?)\s+(.*?)\s+(.*?)\s+(.*?)\s+(.*?)\s*")
_NUMBER = re.compile(r"[0-9]+")
_RANGE = re.compile(r"([0-9]+)-([0-9]+)")
_STEP = re.compile(r"([0-9]+|\*)/([0-9]+)")

_NAMES: dict[Field, tuple[str, ...]] = {
    Field.MONTHS: MONTH_NAMES,
    Field.DAY_OF_WEEK: DAY_NAMES,
}


def has_any_in_range(values: Iterable[int], low: int, high: int) -> bool:
    """Tell whether any number from ``low`` to ``high`` inclusive is in ``values``."""
    present = set(values)
    return any(v in present for v in range(low, high + 1))


def _full_range(field: Field) -> set[int]:
    return set(range(field.first, field.last + 1))


def parse_range(text: str, field: Field) -> set[int]:
    """Turn one comma-free part of a field (``*``, ``5``, ``1-3``, ``*/2``) into values."""
    if text in ("*", "?"):
        # The ignore-character '?' allows the full range, the same as '*'.
        return _full_range(field)

    if _NUMBER.fullmatch(text):
        number = int(text)
        if field.contains(number):
            return {number}
        raise InvalidCronExpression(f"{number} is out of range for {field}")

    match = _RANGE.fullmatch(text)
    if match:
        left, right = int(match[1]), int(match[2])
        if field.contains(left) and field.contains(right):
            # 22-1 wraps around: 22, 23, 0, 1 for hours.
            if left <= right:
                return set(range(left, right + 1))
            return set(range(left, field.last + 1)) | set(range(field.first, right + 1))

    match = _STEP.fullmatch(text)
    if match:
        start = field.first if match[1] == "*" else int(match[1])
        step = int(match[2])
        if field.contains(start) and step > 0:
            return set(range(start, field.last + 1, step))

    raise InvalidCronExpression(f"invalid {field} value: {text!r}")


def replace_names_with_numbers(text: str, field: Field) -> str:
    """Replace month or day names (any case) in ``text`` with their numbers."""
    try:
        names = _NAMES[field]
    except KeyError:
        raise ValueError(f"{field} has no names") from None
    for value, name in enumerate(names, start=field.first):
        text = re.sub(name, str(value), text, flags=re.IGNORECASE)
    return text


def _split(text: str) -> list[str]:
    parts = text.split(",")
    if parts[-1] == "":
        parts.pop()
    return parts


def _parse_field(text: str, field: Field) -> frozenset[int]:
    if field in _NAMES:
        text = replace_names_with_numbers(text, field)
    values: set[int] = set()
    for part in _split(text):
        values |= parse_range(part, field)
    return frozenset(values)


def _dom_vs_dow_ok(dom: str, dow: str) -> bool:
    # Day of month and day of week exclude each other: one of them must be '?'
    # unless exactly one of them is '*'.
    def check(left: str, right: str) -> bool:
        return left == "*" and right != "*"

    return dom == "?" or dow == "?" or check(dom, dow) or check(dow, dom)


@dataclass(frozen=True)
class CronData:
    """The values allowed in each field of a parsed cron expression."""

    seconds: frozenset[int]
    minutes: frozenset[int]
    hours: frozenset[int]
    day_of_month: frozenset[int]
    months: frozenset[int]
    day_of_week: frozenset[int]

    _cache: ClassVar[dict[str, CronData]] = {}

    @classmethod
    def create(cls, expression: str) -> CronData:
        """Parse ``expression``, reusing an earlier result for the same text."""
        found = cls._cache.get(expression)
        if found is None:
            found = cls.parse(expression)
            cls._cache[expression] = found
        return found

    @classmethod
    def parse(cls, expression: str) -> CronData:
        """Parse a six-part cron expression, raising InvalidCronExpression if it is wrong."""
        for short, long in _CONVENIENCE:
            expression = expression.replace(short, long)

        match = SIX_PARTS.fullmatch(expression)
        if not match:
            raise InvalidCronExpression(f"expected six parts in {expression!r}")

        data = cls(
            seconds=_parse_field(match[1], Field.SECONDS),
            minutes=_parse_field(match[2], Field.MINUTES),
            hours=_parse_field(match[3], Field.HOURS),
            day_of_month=_parse_field(match[4], Field.DAY_OF_MONTH),
            months=_parse_field(match[5], Field.MONTHS),
            day_of_week=_parse_field(match[6], Field.DAY_OF_WEEK),
        )

        if not _dom_vs_dow_ok(match[4], match[6]):
            raise InvalidCronExpression(
                "day of month and day of week need '?' in one of them"
            )
        if not data._dates_possible():
            raise InvalidCronExpression(f"no possible date in {expression!r}")
        return data

    def _dates_possible(self) -> bool:
        if self.months == {FEBRUARY} and not has_any_in_range(self.day_of_month, 1, 29):
            return False
        if self.day_of_month == {Field.DAY_OF_MONTH.last}:
            return bool(self.months & MONTHS_WITH_31)
        return True