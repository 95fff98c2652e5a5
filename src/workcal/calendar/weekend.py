from __future__ import annotations

from enum import Enum
from typing import Optional, Union

import numpy as np

from ._days import weekday_of
from ._exceptions import ConfigurationError


class Weekend(Enum):
    """
    Weekly rest-day pattern.

    Paired patterns always name two consecutive weekdays; the value is a
    stable integer code (paired 1-7, single 11-17, none 0).
    """

    NONE = 0
    SATURDAY_AND_SUNDAY = 1
    SUNDAY_AND_MONDAY = 2
    MONDAY_AND_TUESDAY = 3
    TUESDAY_AND_WEDNESDAY = 4
    WEDNESDAY_AND_THURSDAY = 5
    THURSDAY_AND_FRIDAY = 6
    FRIDAY_AND_SATURDAY = 7
    SUNDAY_ONLY = 11
    MONDAY_ONLY = 12
    TUESDAY_ONLY = 13
    WEDNESDAY_ONLY = 14
    THURSDAY_ONLY = 15
    FRIDAY_ONLY = 16
    SATURDAY_ONLY = 17

    @property
    def is_single(self) -> bool:
        return self.value > 10

    @property
    def is_paired(self) -> bool:
        return 0 < self.value < 8

    @property
    def anchor(self) -> Optional[int]:
        """First rest weekday (Monday=0), or None for NONE."""
        if self.is_paired:
            return (self.value + 4) % 7
        if self.is_single:
            return (self.value - 5) % 7
        return None

    @property
    def days(self) -> tuple[int, ...]:
        a = self.anchor
        if a is None:
            return ()
        if self.is_paired:
            return (a, (a + 1) % 7)
        return (a,)

    @classmethod
    def parse(cls, value: Union["Weekend", str, int]) -> "Weekend":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ConfigurationError(f"Unknown weekend pattern {value!r}.") from None
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            try:
                return cls(int(value))
            except ValueError:
                raise ConfigurationError(f"Unknown weekend code {value!r}.") from None
        raise ConfigurationError(f"Invalid weekend type {value!r}.")


def weekend_positions(pattern: Weekend, reference: int, horizon: int) -> np.ndarray:
    """
    Day indices classified as weekend for *horizon* days from *reference*.

    Starts at the most recent anchor weekday at or before *reference* and
    emits one anchor (plus its successor for paired patterns) every seven
    days up to and including ``reference + horizon``.
    """
    if horizon < 0:
        raise ConfigurationError(f"Horizon must be non-negative; got {horizon}.")
    if pattern.anchor is None:
        return np.empty(0, dtype=np.int64)
    first = reference - (weekday_of(reference) - pattern.anchor) % 7
    anchors = np.arange(first, reference + horizon + 1, 7, dtype=np.int64)
    if pattern.is_paired:
        return np.column_stack((anchors, anchors + 1)).ravel()
    return anchors
