class CalendarError(Exception):
    """Base exception for all calendar-related errors."""


class ConfigurationError(CalendarError, ValueError):
    """Reversed range, negative duration or an unknown weekend pattern."""


class DayOffNotFoundError(CalendarError, LookupError):
    """A lookup would need a date outside the representable range."""
