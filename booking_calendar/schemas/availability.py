import datetime
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from booking_calendar.models import ReasonCode


class DateRange(BaseModel):
    """Check-in / check-out selection. Both ends optional while picking."""

    model_config = ConfigDict(frozen=True)

    start: Optional[date] = None
    end: Optional[date] = None

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("range start must not be after range end")
        return self

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def nights(self) -> int:
        if not self.is_complete:
            return 0
        return (self.end - self.start).days


class DayAvailability(BaseModel):
    """Availability facts for one calendar day, as loaded from the source."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    is_blacked_out: bool = False
    has_buyout: bool = False
    day_bookings_count: int = 0
    spots_available: int = 0
    can_book_day: bool = False
    can_book_buyout: bool = False
    has_checkin: bool = False
    has_checkout: bool = False
    is_changeover_day: bool = False


class DayVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    disabled: bool
    reason: Optional[ReasonCode] = None

    @property
    def tooltip(self) -> Optional[str]:
        return self.reason.message if self.reason else None
