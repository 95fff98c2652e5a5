from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Iterable, Optional, Union

import numpy as np

from workcal.dayset import DaySet

from ._days import MAX_DAY, MIN_DAY, DurationLike, from_index, to_days, to_index
from ._exceptions import ConfigurationError, DayOffNotFoundError
from .weekend import Weekend, weekend_positions

if TYPE_CHECKING:
    from workcal.loader import DateLoader

logger = logging.getLogger(__name__)

DateOrDuration = Union[date, DurationLike]


class Calendar:
    """
    Business calendar over four day sets.

    ``weekend``, ``holiday`` and ``flexible_workday`` are the inputs;
    ``day_off`` is materialised and kept equal to
    ``(weekend | holiday) - flexible_workday`` after every mutation.
    The most recent call wins: adding a holiday drops the date from the
    flexible workdays, adding a flexible workday removes it from the days off.

    Every query is answered from ``day_off`` alone, using range cardinality
    so that counts and offsets never walk the calendar day by day.
    """

    _DEFAULT_HORIZON: int = 365 * 5

    def __init__(
        self,
        weekend: Union[Weekend, str, int] = Weekend.SATURDAY_AND_SUNDAY,
        reference: Optional[date] = None,
        horizon: Optional[DurationLike] = None,
        loader: Optional["DateLoader"] = None,
    ) -> None:
        pattern = Weekend.parse(weekend)
        horizon_days = self._DEFAULT_HORIZON if horizon is None else to_days(horizon)
        if horizon_days < 0:
            raise ConfigurationError("Negative duration is not supported.")
        if reference is None:
            reference = date.today()
        ref = to_index(reference)
        if ref + horizon_days > MAX_DAY:
            raise ConfigurationError(
                f"Weekend horizon of {horizon_days} days from {reference} "
                f"extends past {date.max}."
            )

        self._pattern: Weekend = pattern
        self._reference: date = from_index(ref)
        self._horizon: int = horizon_days
        self._loader = loader

        self._weekend = DaySet()
        self._holiday = DaySet()
        self._flexible = DaySet()
        self._day_off = DaySet()

        positions = weekend_positions(pattern, ref, horizon_days)
        self._weekend.add_many(positions)
        self._day_off.add_many(positions)
        logger.debug(
            "Calendar built: pattern=%s reference=%s horizon=%d weekend_days=%d",
            pattern.name, self._reference, horizon_days, len(self._weekend),
        )

    # ── index helpers ────────────────────────────────────────────────────

    @staticmethod
    def _span(start: date, end: DateOrDuration) -> tuple[int, int]:
        lo = to_index(start)
        if isinstance(end, date):
            hi = to_index(end)
            if lo > hi:
                raise ConfigurationError(
                    f"Start date {start} should not be after end date {end}."
                )
        else:
            days = to_days(end)
            if days < 0:
                raise ConfigurationError("Negative duration is not supported.")
            hi = lo + days
            if hi > MAX_DAY:
                raise ConfigurationError(f"Range from {start} extends past {date.max}.")
        return lo, hi

    @classmethod
    def _marks(cls, first: Union[date, Iterable[date]], last: Optional[date]) -> DaySet:
        if last is None:
            if isinstance(first, date):
                return DaySet([to_index(first)])
            return DaySet(np.array([to_index(d) for d in first], dtype=np.int64))
        lo, hi = cls._span(first, last)
        return DaySet.from_range(lo, hi + 1)

    # ── mutation ─────────────────────────────────────────────────────────

    def _mark_holidays(self, marks: DaySet) -> None:
        self._flexible.and_not(marks)
        self._holiday.update(marks)
        self._day_off.update(marks)

    def _mark_flexible(self, marks: DaySet) -> None:
        self._flexible.update(marks)
        self._day_off.and_not(marks)

    def add_holiday(self, day: date) -> None:
        self._mark_holidays(self._marks(day, None))

    def add_holidays(self, first: Union[date, Iterable[date]], last: Optional[date] = None) -> None:
        """
        Mark holidays, either the inclusive range ``first..last`` or, when
        *last* is omitted, every date in the iterable *first*.
        """
        self._mark_holidays(self._marks(first, last))

    def add_flexible_workday(self, day: date) -> None:
        """
        Mark *day* as a working day.  A day that is neither weekend nor
        holiday is still recorded but its status does not change.
        """
        self._mark_flexible(self._marks(day, None))

    def add_flexible_workdays(
        self, first: Union[date, Iterable[date]], last: Optional[date] = None
    ) -> None:
        self._mark_flexible(self._marks(first, last))

    def add_recurring_holidays(self, start: date, interval: DurationLike, count: int) -> None:
        """
        Add *count* holidays, the first on *start*, spaced *interval* days apart.

        A negative *interval* walks backwards from *start*; zero marks *start* only.
        """
        step = to_days(interval)
        if isinstance(count, bool) or not isinstance(count, (int, np.integer)) or count < 0:
            raise ConfigurationError(f"Count must be a non-negative integer; got {count!r}.")
        first = to_index(start)
        if count and not MIN_DAY <= first + (int(count) - 1) * step <= MAX_DAY:
            raise ConfigurationError(
                f"Recurring holidays from {start} leave the range {date.min}..{date.max}."
            )
        positions = first + np.arange(int(count), dtype=np.int64) * step
        self._mark_holidays(DaySet(positions))

    # ── classification ───────────────────────────────────────────────────

    def is_workday(self, day: date) -> bool:
        return not self._day_off.contains(to_index(day))

    def is_day_off(self, day: date) -> bool:
        return self._day_off.contains(to_index(day))

    def is_weekend(self, day: date) -> bool:
        return self._weekend.contains(to_index(day))

    def is_holiday(self, day: date) -> bool:
        return self._holiday.contains(to_index(day))

    def is_flexible_workday(self, day: date) -> bool:
        return self._flexible.contains(to_index(day))

    # ── range queries ────────────────────────────────────────────────────

    def count_workdays(self, start: date, end: DateOrDuration) -> int:
        """
        Workdays in ``start..end`` inclusive, like Excel's NETWORKDAYS.
        *end* may be a date or a non-negative duration after *start*.
        """
        lo, hi = self._span(start, end)
        return (hi - lo + 1) - self._day_off.cardinality(lo, hi + 1)

    def day_offs(self, start: date, end: DateOrDuration) -> list[date]:
        """Days off in ``start..end`` inclusive, ascending."""
        lo, hi = self._span(start, end)
        return [from_index(int(i)) for i in self._day_off.members(lo, hi + 1)]

    def next_day_off(self, day: date) -> date:
        """First day off strictly after *day*."""
        found = self._day_off.next_member(to_index(day))
        if found is None:
            raise DayOffNotFoundError(f"No day off after {day}.")
        return from_index(found)

    # ── workday offsets ──────────────────────────────────────────────────

    def workday(self, start: date, duration: DurationLike) -> date:
        """
        The date *duration* workdays after *start*, not counting *start*,
        like Excel's WORKDAY.

        The candidate window ``(cursor, cursor + remaining]`` is moved past
        its end and resized to the number of days off it contained, until it
        contains none.  A run of days off directly ahead of the cursor is
        skipped whole, so the loop runs once per block of days off crossed
        rather than once per day.
        """
        days = to_days(duration)
        if days < 0:
            raise ConfigurationError("Negative duration is not supported.")
        cursor, remaining = to_index(start), days
        while True:
            target = cursor + remaining
            if target > MAX_DAY:
                raise DayOffNotFoundError(
                    f"{days} workdays after {start} is past {date.max}."
                )
            blocked = self._day_off.cardinality(cursor + 1, target + 1)
            if not blocked:
                return from_index(target)
            cursor, remaining = target, blocked
            if self._day_off.contains(cursor + 1):
                cursor = self._day_off.next_absent(cursor) - 1

    def reverse_workday(
        self,
        end: date,
        duration: DurationLike,
        require_workday_end: bool = False,
    ) -> date:
        """
        The date *duration* workdays before *end*, not counting *end*.

        With *require_workday_end*, an *end* that is a day off is first moved
        back to the closest earlier workday; that move consumes no duration.
        """
        days = to_days(duration)
        if days < 0:
            raise ConfigurationError("Negative duration is not supported.")
        cursor = to_index(end)
        if require_workday_end and self._day_off.contains(cursor):
            rebased = self._day_off.previous_absent(cursor)
            if rebased is None or rebased < MIN_DAY:
                raise DayOffNotFoundError(f"No workday before {end}.")
            cursor = rebased
        remaining = days
        while True:
            target = cursor - remaining
            if target < MIN_DAY:
                raise DayOffNotFoundError(
                    f"{days} workdays before {end} is before {date.min}."
                )
            blocked = self._day_off.cardinality(target, cursor)
            if not blocked:
                return from_index(target)
            cursor, remaining = target, blocked
            if self._day_off.contains(cursor - 1):
                cursor = self._day_off.previous_absent(cursor) + 1

    # ── loader ───────────────────────────────────────────────────────────

    def refresh(self, year: Optional[int] = None) -> bool:
        """
        Re-apply the loader's classifications for *year* (default: the
        current year) if the loader reports its data as outdated.
        Returns True when an update ran and succeeded.
        """
        if self._loader is None or not self._loader.is_outdated():
            return False
        if year is None:
            year = date.today().year
        return self._loader.update(year, self)

    # ── properties / repr ────────────────────────────────────────────────

    def day_off_set(self) -> DaySet:
        return self._day_off.clone()

    @property
    def weekend_pattern(self) -> Weekend:
        return self._pattern

    @property
    def reference(self) -> date:
        return self._reference

    @property
    def horizon(self) -> int:
        return self._horizon

    @property
    def loader(self) -> Optional["DateLoader"]:
        return self._loader

    def __repr__(self) -> str:
        return (
            f"Calendar(weekend={self._pattern.name}, "
            f"reference={self._reference.isoformat()}, "
            f"horizon={self._horizon}, "
            f"holidays={len(self._holiday)}, "
            f"flexible_workdays={len(self._flexible)}, "
            f"day_offs={len(self._day_off)})"
        )
