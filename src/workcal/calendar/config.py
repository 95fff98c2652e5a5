from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import TYPE_CHECKING, Optional, Union

from ._days import DurationLike, to_days
from ._exceptions import ConfigurationError
from .calendar import Calendar
from .weekend import Weekend

if TYPE_CHECKING:
    from workcal.loader import DateLoader

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CalendarConfig:
    """
    Settings for building a Calendar.

    ``reference=None`` means "today", resolved when ``build()`` runs.
    """

    weekend: Union[Weekend, str, int] = Weekend.SATURDAY_AND_SUNDAY
    reference: Optional[date] = None
    horizon: DurationLike = field(default_factory=lambda: timedelta(days=365 * 5))
    loader: Optional["DateLoader"] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "weekend", Weekend.parse(self.weekend))
        if to_days(self.horizon) < 0:
            raise ConfigurationError("Negative duration is not supported.")
        if self.reference is not None and not isinstance(self.reference, date):
            raise ConfigurationError(f"Reference must be a date; got {self.reference!r}.")

    def with_weekend(self, weekend: Union[Weekend, str, int]) -> "CalendarConfig":
        return replace(self, weekend=weekend)

    def with_reference(self, reference: date) -> "CalendarConfig":
        return replace(self, reference=reference)

    def with_horizon(self, horizon: DurationLike) -> "CalendarConfig":
        return replace(self, horizon=horizon)

    def with_loader(self, loader: "DateLoader") -> "CalendarConfig":
        return replace(self, loader=loader)

    def build(self) -> Calendar:
        calendar = Calendar(
            weekend=self.weekend,
            reference=self.reference,
            horizon=self.horizon,
            loader=self.loader,
        )
        if self.loader is not None:
            ok = self.loader.load(calendar)
            logger.info("Loader %s populated calendar: %s", type(self.loader).__name__, ok)
        return calendar
