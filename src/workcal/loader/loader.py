from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Protocol, runtime_checkable

from workcal.calendar._exceptions import CalendarError, ConfigurationError

if TYPE_CHECKING:
    from workcal.calendar import Calendar

logger = logging.getLogger(__name__)


class LoaderError(CalendarError):
    """The event source failed; no classification from that call was applied."""


@runtime_checkable
class DateLoader(Protocol):
    def load(self, calendar: "Calendar") -> bool: ...

    def update(self, year: int, calendar: "Calendar") -> bool: ...

    def is_outdated(self) -> bool: ...


class NoopLoader:
    """Loader that knows no dates."""

    def load(self, calendar: "Calendar") -> bool:
        return True

    def update(self, year: int, calendar: "Calendar") -> bool:
        return True

    def is_outdated(self) -> bool:
        return False


class EventKind(Enum):
    HOLIDAY = "holiday"
    WORKDAY = "workday"


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    """
    One all-day feed entry.

    ``end`` is the feed's exclusive end date and is None for single-day
    events.
    """

    summary: str
    start: date
    end: Optional[date] = None

    def __post_init__(self) -> None:
        if not isinstance(self.summary, str):
            raise ConfigurationError(f"Event summary must be a string; got {self.summary!r}.")
        if not isinstance(self.start, date) or not isinstance(self.end, (date, type(None))):
            raise ConfigurationError(
                f"Event {self.summary!r} needs date bounds; got {self.start!r}, {self.end!r}."
            )
        if self.end is not None and self.end <= self.start:
            raise ConfigurationError(
                f"Event {self.summary!r} ends ({self.end}) on or before it starts ({self.start})."
            )

    @property
    def last_day(self) -> date:
        return self.start if self.end is None else self.end - timedelta(days=1)

    def overlaps(self, first: date, last: date) -> bool:
        return self.start <= last and self.last_day >= first


EventSource = Callable[[], Iterable[CalendarEvent]]


class EventLoader:
    """
    Applies holiday / working-day events from a feed to a Calendar.

    *source* performs the fetch and parse and returns the feed's events.
    An event whose summary contains *holiday_marker* becomes a holiday,
    otherwise one containing *workday_marker* becomes a flexible workday,
    anything else is ignored.  Events are applied from the end of the feed
    backwards, so for overlapping entries the earliest one in the feed wins.

    The whole feed is fetched and classified before the calendar is touched;
    a failing source or a malformed entry raises LoaderError and leaves the
    calendar and the staleness clock as they were.
    """

    def __init__(
        self,
        source: EventSource,
        holiday_marker: str = "休",
        workday_marker: str = "班",
        cache_valid_days: int = 300,
        cache_valid_days_dec_jan: int = 2,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if not holiday_marker or not workday_marker:
            raise ConfigurationError("Event markers must not be empty.")
        if cache_valid_days < 0 or cache_valid_days_dec_jan < 0:
            raise ConfigurationError("Cache validity must be non-negative.")
        self._source = source
        self._holiday_marker = holiday_marker
        self._workday_marker = workday_marker
        self._cache_valid_days = cache_valid_days
        self._cache_valid_days_dec_jan = cache_valid_days_dec_jan
        self._clock: Callable[[], datetime] = clock or datetime.now
        self._fetched_at: Optional[datetime] = None

    # ── classification ───────────────────────────────────────────────────

    def classify(self, event: CalendarEvent) -> Optional[EventKind]:
        if self._holiday_marker in event.summary:
            return EventKind.HOLIDAY
        if self._workday_marker in event.summary:
            return EventKind.WORKDAY
        return None

    def _fetch(self) -> tuple[list[CalendarEvent], datetime]:
        fetched_at = self._clock()
        try:
            events = list(self._source())
        except Exception as exc:
            logger.warning("Calendar event source failed: %s", exc)
            raise LoaderError("Failed to fetch calendar events.") from exc
        return events, fetched_at

    def _stage(self, events: list[CalendarEvent], year: Optional[int]) -> list[tuple[EventKind, date, date]]:
        """Filter and classify *events*, newest first; raises before anything is applied."""
        staged: list[tuple[EventKind, date, date]] = []
        for event in reversed(events):
            if not isinstance(event, CalendarEvent):
                raise LoaderError(f"Feed entry {event!r} is not a CalendarEvent.")
            if year is not None and not event.overlaps(date(year, 1, 1), date(year, 12, 31)):
                continue
            kind = self.classify(event)
            if kind is None:
                continue
            staged.append((kind, event.start, event.last_day))
        return staged

    @staticmethod
    def _apply(staged: list[tuple[EventKind, date, date]], calendar: "Calendar") -> None:
        for kind, first, last in staged:
            if kind is EventKind.HOLIDAY:
                calendar.add_holidays(first, last)
            else:
                calendar.add_flexible_workdays(first, last)

    def _run(self, year: Optional[int], calendar: "Calendar") -> int:
        events, fetched_at = self._fetch()
        staged = self._stage(events, year)
        self._apply(staged, calendar)
        self._fetched_at = fetched_at
        return len(staged)

    # ── loader protocol ──────────────────────────────────────────────────

    def load(self, calendar: "Calendar") -> bool:
        count = self._run(None, calendar)
        logger.info("Loaded %d calendar events", count)
        return True

    def update(self, year: int, calendar: "Calendar") -> bool:
        count = self._run(year, calendar)
        logger.info("Updated %d calendar events for %d", count, year)
        return True

    def is_outdated(self) -> bool:
        if self._fetched_at is None:
            return True
        now = self._clock()
        # New-year holiday schedules are published around December.
        valid = self._cache_valid_days_dec_jan if now.month in (1, 12) else self._cache_valid_days
        return now - timedelta(days=valid) > self._fetched_at

    @property
    def fetched_at(self) -> Optional[datetime]:
        return self._fetched_at

    def __repr__(self) -> str:
        return (
            f"EventLoader(holiday_marker={self._holiday_marker!r}, "
            f"workday_marker={self._workday_marker!r}, "
            f"fetched_at={self._fetched_at})"
        )
