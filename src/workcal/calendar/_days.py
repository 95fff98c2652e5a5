from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Union

import numpy as np

from ._exceptions import ConfigurationError, DayOffNotFoundError

DurationLike = Union[int, np.integer, timedelta]

EPOCH = date(1970, 1, 1)
_EPOCH_ORDINAL: int = EPOCH.toordinal()

# date.min and date.max as day indices; both fit in a signed 32-bit int.
MIN_DAY: int = date.min.toordinal() - _EPOCH_ORDINAL
MAX_DAY: int = date.max.toordinal() - _EPOCH_ORDINAL

# 1970-01-01 was a Thursday.
_EPOCH_WEEKDAY: int = EPOCH.weekday()


def to_index(day: date) -> int:
    """Days since 1970-01-01.  A datetime contributes its date part."""
    if isinstance(day, datetime):
        day = day.date()
    if not isinstance(day, date):
        raise ConfigurationError(f"Expected a date; got {day!r}.")
    return day.toordinal() - _EPOCH_ORDINAL


def from_index(index: int) -> date:
    if index < MIN_DAY or index > MAX_DAY:
        raise DayOffNotFoundError(
            f"Day index {index} is outside the representable date range."
        )
    return date.fromordinal(int(index) + _EPOCH_ORDINAL)


def weekday_of(index: int) -> int:
    """Python weekday (Monday=0) of a day index."""
    return (index + _EPOCH_WEEKDAY) % 7


def to_days(duration: DurationLike) -> int:
    if isinstance(duration, timedelta):
        return duration.days
    if isinstance(duration, (bool, np.bool_)) or not isinstance(duration, (int, np.integer)):
        raise ConfigurationError(
            f"Duration must be a whole number of days or a timedelta; got {duration!r}."
        )
    return int(duration)
