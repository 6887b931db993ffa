"""
Availability and eligibility rules for calendar days.

Every check returns a ReasonCode for the first rule a day violates, or None
when the day is selectable. `is_disabled` and `unavailability_reason` are both
views over the same ordered evaluation.
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional, Sequence

from booking_calendar.core.config import settings
from booking_calendar.models import BookingMode, Property, ReasonCode, SelectionState
from booking_calendar.schemas.availability import DayAvailability, DayVerdict
from booking_calendar.schemas.season import Season
from booking_calendar.services.season_service import (
    find_season_for_date,
    is_date_selectable,
    max_nights_for,
)

logger = logging.getLogger(__name__)

SATURDAY = 5


@dataclass(frozen=True)
class RuleContext:
    min_date: date
    property: Property
    today: date
    mode: BookingMode = BookingMode.DAY
    availability: Mapping[date, DayAvailability] = field(default_factory=dict)
    seasons: Sequence[Season] = ()
    max_date: Optional[date] = None
    range_start: Optional[date] = None
    state: SelectionState = SelectionState.SET_START
    allow_saturdays: bool = False
    guests: int = 1

    def with_selection(
        self, state: SelectionState, range_start: Optional[date]
    ) -> "RuleContext":
        return replace(self, state=state, range_start=range_start)

    @property
    def picking_end(self) -> bool:
        return self.state is SelectionState.SET_END and self.range_start is not None

    @property
    def property_seasons(self) -> list[Season]:
        return [s for s in self.seasons if s.property == self.property]

    @property
    def saturday_rules_apply(self) -> bool:
        return self.property == Property.TAHOE and not self.allow_saturdays


class AvailabilityRuleEngine:
    def __init__(self, max_nights_defaults: Optional[Mapping[str, int]] = None):
        if max_nights_defaults is None:
            max_nights_defaults = settings.max_nights_defaults()
        self.max_nights_defaults = dict(max_nights_defaults)

    # --- public API ---

    def is_disabled(self, day: date, ctx: RuleContext) -> bool:
        return self.violation(day, ctx) is not None

    def unavailability_reason(self, day: date, ctx: RuleContext) -> ReasonCode:
        return self.violation(day, ctx) or ReasonCode.UNAVAILABLE

    def evaluate(self, day: date, ctx: RuleContext) -> DayVerdict:
        reason = self.violation(day, ctx)
        return DayVerdict(day=day, disabled=reason is not None, reason=reason)

    def evaluate_month(
        self, days: Iterable[date], ctx: RuleContext
    ) -> dict[date, DayVerdict]:
        return {day: self.evaluate(day, ctx) for day in days}

    def is_valid_end_date(self, day: date, ctx: RuleContext) -> bool:
        if ctx.range_start is None:
            return False
        return self.end_date_violation(day, ctx.range_start, ctx) is None

    def is_range_valid(self, start: date, end: date, ctx: RuleContext) -> bool:
        return self.range_violation(start, end, ctx) is None

    def max_nights(self, range_start: date, ctx: RuleContext) -> Optional[int]:
        season = find_season_for_date(ctx.property_seasons, range_start)
        return max_nights_for(season, ctx.property, self.max_nights_defaults)

    # --- rule evaluation ---

    def violation(self, day: date, ctx: RuleContext) -> Optional[ReasonCode]:
        """First rule `day` breaks under `ctx`, in precedence order."""
        reason = self._window_violation(day, ctx)
        if reason is None:
            if ctx.picking_end:
                reason = self._checkout_violation(day, ctx)
            else:
                reason = self._checkin_violation(day, ctx)

        if reason is not None:
            logger.debug(f"{day.isoformat()} disabled ({ctx.state.value}): {reason.value}")
        return reason

    def end_date_violation(
        self, day: date, range_start: date, ctx: RuleContext
    ) -> Optional[ReasonCode]:
        nights = (day - range_start).days
        max_nights = self.max_nights(range_start, ctx)

        if max_nights is None:
            # Fail closed: without a stay limit nothing can be validated
            return ReasonCode.UNAVAILABLE

        if nights < 1 or nights > max_nights:
            return ReasonCode.MIN_MAX_NIGHTS

        if ctx.saturday_rules_apply and day.weekday() == SATURDAY:
            return ReasonCode.SATURDAY_RESTRICTED

        # Checkout day is excluded: checkout is in the morning, check-in in the afternoon
        for offset in range(nights):
            night = range_start + timedelta(days=offset)
            reason = self._night_violation(night, ctx, first_night=offset == 0)
            if reason is not None:
                return reason

        # Only a Saturday checkout can break this, and it is rejected above
        if ctx.saturday_rules_apply and breaks_weekend_rule(range_start, day):
            return ReasonCode.WEEKEND_RULE_VIOLATION

        return None

    def range_violation(
        self, start: date, end: date, ctx: RuleContext
    ) -> Optional[ReasonCode]:
        """Full check of a stay: check-in day, every night in between, checkout day."""
        if end <= start:
            return ReasonCode.MIN_MAX_NIGHTS

        reason = self.violation(start, ctx.with_selection(SelectionState.SET_START, None))
        if reason is not None:
            return reason

        night = start + timedelta(days=1)
        while night < end:
            reason = self._window_violation(night, ctx)
            if reason is not None:
                return reason
            night += timedelta(days=1)

        return self.violation(end, ctx.with_selection(SelectionState.SET_END, start))

    def _window_violation(self, day: date, ctx: RuleContext) -> Optional[ReasonCode]:
        if day < ctx.min_date:
            return ReasonCode.PAST_DATE

        if ctx.max_date is not None and day > ctx.max_date:
            return ReasonCode.BEYOND_MAX

        if not is_date_selectable(ctx.property_seasons, day, ctx.today):
            return ReasonCode.SEASON_CLOSED

        return None

    def _checkin_violation(self, day: date, ctx: RuleContext) -> Optional[ReasonCode]:
        if ctx.saturday_rules_apply and day.weekday() == SATURDAY:
            return ReasonCode.SATURDAY_RESTRICTED
        return self._day_record_violation(day, ctx, as_checkout=False)

    def _checkout_violation(self, day: date, ctx: RuleContext) -> Optional[ReasonCode]:
        reason = self.end_date_violation(day, ctx.range_start, ctx)
        if reason is not None:
            return reason
        return self._day_record_violation(day, ctx, as_checkout=True)

    def _day_record_violation(
        self, day: date, ctx: RuleContext, as_checkout: bool
    ) -> Optional[ReasonCode]:
        record = ctx.availability.get(day)
        if record is None:
            # Not loaded means not known to be free
            return ReasonCode.UNAVAILABLE

        if record.is_blacked_out:
            return ReasonCode.BLACKOUT

        if ctx.mode == BookingMode.BUYOUT:
            if record.day_bookings_count > 0:
                return ReasonCode.FULLY_BOOKED
            if record.has_buyout and not _same_day_turnaround(record, as_checkout):
                return ReasonCode.FULLY_BOOKED
            return None

        if record.has_buyout or record.spots_available <= 0:
            return ReasonCode.FULLY_BOOKED
        # The party leaves on the checkout morning
        if not as_checkout and record.spots_available < ctx.guests:
            return ReasonCode.NOT_ENOUGH_SPOTS
        return None

    def _night_violation(
        self, night: date, ctx: RuleContext, first_night: bool
    ) -> Optional[ReasonCode]:
        if first_night:
            return self._day_record_violation(night, ctx, as_checkout=False)

        record = ctx.availability.get(night)
        if record is None:
            return ReasonCode.UNAVAILABLE
        if record.is_blacked_out:
            return ReasonCode.BLACKOUT

        if ctx.mode == BookingMode.BUYOUT:
            return None if record.can_book_buyout else ReasonCode.FULLY_BOOKED

        if not record.can_book_day:
            return ReasonCode.FULLY_BOOKED
        if record.spots_available < ctx.guests:
            return ReasonCode.NOT_ENOUGH_SPOTS
        return None


def _same_day_turnaround(record: DayAvailability, as_checkout: bool) -> bool:
    # Morning checkout frees the day for an afternoon check-in, and vice versa
    if as_checkout:
        return record.has_checkin
    return record.has_checkout


def breaks_weekend_rule(start: date, end: date) -> bool:
    day = start
    while day <= end:
        if day.weekday() == SATURDAY and day + timedelta(days=1) > end:
            return True
        day += timedelta(days=1)
    return False
