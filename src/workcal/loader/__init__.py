# src/workcal/loader/__init__.py
"""
workcal.loader
~~~~~~~~~~~~~~

Populating a Calendar from a holiday feed.  A loader exposes ``load``,
``update(year)`` and ``is_outdated``; the Calendar only ever sees the
holiday and flexible-workday additions a loader makes.

Basic usage::

    from datetime import date
    from workcal.calendar import CalendarConfig
    from workcal.loader import CalendarEvent, EventLoader

    def fetch():
        return [
            CalendarEvent("劳动节 休", date(2024, 5, 1), end=date(2024, 5, 6)),
            CalendarEvent("劳动节 班", date(2024, 5, 11)),
        ]

    cal = CalendarConfig(loader=EventLoader(fetch)).build()

Public API
----------
DateLoader     Loader protocol.
NoopLoader     Loader with no dates.
EventLoader    Applies CalendarEvents from a caller-supplied source.
CalendarEvent  One all-day feed entry (exclusive end date).
EventKind      Holiday or working-day classification.
LoaderError    The source failed; nothing was applied.
"""

from __future__ import annotations

from workcal.loader.loader import (
    CalendarEvent,
    DateLoader,
    EventKind,
    EventLoader,
    LoaderError,
    NoopLoader,
)

__all__ = [
    "DateLoader",
    "NoopLoader",
    "EventLoader",
    "CalendarEvent",
    "EventKind",
    "LoaderError",
]
