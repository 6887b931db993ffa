import logging
from datetime import date, timedelta
from typing import Iterable, Iterator, Optional

from booking_calendar.core.config import settings
from booking_calendar.models import BookingMode, Property
from booking_calendar.schemas.availability import DayAvailability
from booking_calendar.schemas.booking import Blackout, BookingRecord
from booking_calendar.schemas.season import Season

logger = logging.getLogger(__name__)


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


class InMemoryAvailabilitySource:
    """
    Builds per-day availability from a list of bookings and blackouts.

    A booking occupies every day from check-in through checkout inclusive;
    the has_checkin / has_checkout flags let the rule engine allow same-day
    turnarounds on the boundary days.
    """

    def __init__(
        self,
        bookings: Iterable[BookingRecord] = (),
        blackouts: Iterable[Blackout] = (),
        capacity: Optional[int] = None,
    ):
        self.bookings = tuple(bookings)
        self.blackouts = tuple(blackouts)
        self.capacity = capacity if capacity is not None else settings.day_booking_capacity

    def fetch(
        self, start_date: date, end_date: date, property: Property
    ) -> dict[date, DayAvailability]:
        if end_date < start_date:
            raise ValueError(f"end_date {end_date} is before start_date {start_date}")

        guests = {day: 0 for day in iter_days(start_date, end_date)}
        buyout_days: set[date] = set()
        checkin_days: set[date] = set()
        checkout_days: set[date] = set()

        for booking in self.bookings:
            if booking.property != property or not booking.occupies_capacity:
                continue
            if booking.checkout_date < start_date or booking.checkin_date > end_date:
                continue

            first = max(booking.checkin_date, start_date)
            last = min(booking.checkout_date, end_date)
            for day in iter_days(first, last):
                if booking.booking_mode == BookingMode.BUYOUT:
                    buyout_days.add(day)
                else:
                    guests[day] += booking.guests_count

            checkin_days.add(booking.checkin_date)
            checkout_days.add(booking.checkout_date)

        blacked_out = {
            day
            for blackout in self.blackouts
            if blackout.property == property and blackout.overlaps(start_date, end_date)
            for day in iter_days(
                max(blackout.start_date, start_date), min(blackout.end_date, end_date)
            )
        }

        availability = {}
        for day, occupied in guests.items():
            is_blacked_out = day in blacked_out
            has_buyout = day in buyout_days
            spots_available = max(0, self.capacity - occupied)
            has_checkin = day in checkin_days
            has_checkout = day in checkout_days

            availability[day] = DayAvailability(
                date=day,
                is_blacked_out=is_blacked_out,
                has_buyout=has_buyout,
                day_bookings_count=occupied,
                spots_available=spots_available,
                can_book_day=not is_blacked_out and spots_available > 0 and not has_buyout,
                can_book_buyout=not is_blacked_out and not has_buyout and occupied == 0,
                has_checkin=has_checkin,
                has_checkout=has_checkout,
                is_changeover_day=has_checkin and has_checkout,
            )

        logger.debug(
            f"Built availability for {Property(property).value}: {start_date} - {end_date} "
            f"({len(availability)} days, {len(blacked_out)} blacked out)"
        )
        return availability


class InMemorySeasonRepository:
    def __init__(self, seasons: Iterable[Season] = ()):
        self.seasons = tuple(seasons)

    def list(self, property: Property) -> list[Season]:
        return [season for season in self.seasons if season.property == property]
