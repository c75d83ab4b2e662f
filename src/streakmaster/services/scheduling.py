"""Scheduling predicate: is a habit due on a given calendar day?

All comparisons are by calendar day. ``datetime`` inputs are stripped to their
date before comparing, so a habit started at 23:59 is still due that day.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Iterator

from ..exceptions import InvalidWeekdaySetError
from ..models.habit import Frequency, Habit, weekday_of

WEEKDAY_RANGE = range(0, 7)
WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def as_day(value: date | datetime) -> date:
    """Normalize a date or datetime to a plain calendar date (midnight)."""

    if isinstance(value, datetime):
        return value.date()
    return value


def validate_weekdays(frequency: Frequency | str, weekdays: Iterable[int] | None) -> list[int] | None:
    """Return the normalized weekday set for ``frequency``.

    Custom weekday habits need a non-empty set drawn from 0-6; other frequencies
    ignore the set entirely and get ``None`` back.

    Raises:
        InvalidWeekdaySetError: custom frequency with an empty or out-of-range set
    """
    if Frequency(frequency) is not Frequency.CUSTOM_WEEKDAYS:
        return None
    if weekdays is None:
        raise InvalidWeekdaySetError(None)
    values = list(weekdays)
    if not values or any(
        isinstance(day, bool) or not isinstance(day, int) or day not in WEEKDAY_RANGE
        for day in values
    ):
        raise InvalidWeekdaySetError(values)
    return sorted(set(values))


def is_scheduled(habit: Habit, day: date | datetime) -> bool:
    """Return True when ``day`` is a scheduled occurrence of ``habit``."""

    check = as_day(day)
    start = as_day(habit.start_date)

    if check < start:
        return False
    if habit.end_date is not None and check > as_day(habit.end_date):
        return False

    frequency = Frequency(habit.frequency)
    if frequency is Frequency.DAILY:
        return True
    if frequency is Frequency.CUSTOM_WEEKDAYS:
        return weekday_of(check) in set(habit.weekdays or ())
    return weekday_of(check) == habit.weekly_occurrence_weekday()


def scheduled_dates(habit: Habit, start: date, end: date) -> Iterator[date]:
    """Yield every scheduled day of ``habit`` in the inclusive range ``[start, end]``."""

    cursor = as_day(start)
    last = as_day(end)
    while cursor <= last:
        if is_scheduled(habit, cursor):
            yield cursor
        cursor += timedelta(days=1)


__all__ = [
    "WEEKDAY_NAMES",
    "as_day",
    "is_scheduled",
    "scheduled_dates",
    "validate_weekdays",
]
