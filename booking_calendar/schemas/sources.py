"""
Interfaces the engine expects from the hosting application.
"""
from datetime import date
from typing import Callable, Mapping, Protocol, Sequence

from booking_calendar.models import Property
from booking_calendar.schemas.availability import DateRange, DayAvailability
from booking_calendar.schemas.season import Season


class AvailabilitySource(Protocol):
    def fetch(
        self, start_date: date, end_date: date, property: Property
    ) -> Mapping[date, DayAvailability]:
        """Availability records for every day in [start_date, end_date]."""
        ...


class SeasonRepository(Protocol):
    def list(self, property: Property) -> Sequence[Season]:
        ...


CommitCallback = Callable[[DateRange], None]
