import datetime
from enum import Enum


class Property(str, Enum):
    TAHOE = "tahoe"
    CLEAR_LAKE = "clear_lake"


class BookingMode(str, Enum):
    DAY = "day"  # Shared, per-person booking
    BUYOUT = "buyout"  # Whole property, exclusive


class BookingStatus(str, Enum):
    HOLD = "hold"  # Checkout in progress, capacity is held
    COMPLETE = "complete"
    CANCELED = "canceled"


class SelectionState(str, Enum):
    SET_START = "set_start"
    SET_END = "set_end"
    RESET = "reset"  # Transient, same as SET_START for every rule

    @property
    def picks_start(self) -> bool:
        return self is not SelectionState.SET_END

    @classmethod
    def for_range(
        cls, start: datetime.date | None, end: datetime.date | None
    ) -> "SelectionState":
        """Resume position for a calendar mounted with an existing selection."""
        if start is not None and end is None:
            return cls.SET_END
        return cls.SET_START


class ReasonCode(str, Enum):
    PAST_DATE = "past_date"
    BEYOND_MAX = "beyond_max"
    SEASON_CLOSED = "season_closed"
    BLACKOUT = "blackout"
    FULLY_BOOKED = "fully_booked"
    NOT_ENOUGH_SPOTS = "not_enough_spots"
    SATURDAY_RESTRICTED = "saturday_restricted"
    WEEKEND_RULE_VIOLATION = "weekend_rule_violation"
    MIN_MAX_NIGHTS = "min_max_nights"
    UNAVAILABLE = "unavailable"

    @property
    def message(self) -> str:
        return REASON_MESSAGES[self]


REASON_MESSAGES = {
    ReasonCode.PAST_DATE: "This date is in the past",
    ReasonCode.BEYOND_MAX: "This date is beyond the maximum booking date",
    ReasonCode.SEASON_CLOSED: "This date is outside the booking season",
    ReasonCode.BLACKOUT: "This date is blacked out (maintenance or special event)",
    ReasonCode.FULLY_BOOKED: "This date is fully booked",
    ReasonCode.NOT_ENOUGH_SPOTS: "Not enough spots left for your party",
    ReasonCode.SATURDAY_RESTRICTED: "Check-in and check-out are not allowed on Saturdays",
    ReasonCode.WEEKEND_RULE_VIOLATION: "If your stay includes Saturday, it must also include Sunday",
    ReasonCode.MIN_MAX_NIGHTS: "Stay length is outside the allowed number of nights",
    ReasonCode.UNAVAILABLE: "This date is unavailable",
}
