# src/workcal/calendar/__init__.py
"""
workcal.calendar
~~~~~~~~~~~~~~~~

Business-day arithmetic over dates.  A Calendar classifies every date as a
workday or a day off from three inputs: a weekly weekend pattern generated
for a bounded horizon, explicitly added holidays, and flexible workdays that
turn a weekend or holiday back into a working day.

Basic usage::

    from datetime import date
    from workcal.calendar import Calendar, Weekend

    cal = Calendar(Weekend.SATURDAY_AND_SUNDAY, reference=date(2024, 3, 9), horizon=365)
    cal.add_holidays(date(2024, 4, 22), date(2024, 4, 25))
    cal.add_flexible_workday(date(2024, 3, 30))
    cal.count_workdays(date(2024, 3, 22), date(2024, 3, 30))   # → 7
    cal.workday(date(2024, 3, 22), 7)                          # → 2024-03-31

Or through the configuration object::

    from workcal.calendar import CalendarConfig

    cal = CalendarConfig(weekend="friday_and_saturday").build()

Public API
----------
Calendar             The engine.
CalendarConfig       Frozen settings with a ``build()`` method.
Weekend              Weekend pattern enumeration.
CalendarError        Base exception for all calendar-related errors.
ConfigurationError   Invalid range, duration or pattern.
DayOffNotFoundError  Lookup past the representable date range.
to_index, from_index Date ↔ day-index conversion (days since 1970-01-01).
"""

from __future__ import annotations

from workcal.calendar._days import from_index, to_index
from workcal.calendar._exceptions import (
    CalendarError,
    ConfigurationError,
    DayOffNotFoundError,
)
from workcal.calendar.calendar import Calendar
from workcal.calendar.config import CalendarConfig
from workcal.calendar.weekend import Weekend

__all__ = [
    "Calendar",
    "CalendarConfig",
    "Weekend",
    "CalendarError",
    "ConfigurationError",
    "DayOffNotFoundError",
    "to_index",
    "from_index",
]
