from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

from booking_calendar.models import BookingMode, BookingStatus, Property


class BookingRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    property: Property
    booking_mode: BookingMode = BookingMode.DAY
    checkin_date: date
    checkout_date: date
    guests_count: int = Field(default=1, ge=1)
    status: BookingStatus = BookingStatus.COMPLETE

    @model_validator(mode="after")
    def check_dates(self) -> "BookingRecord":
        if self.checkout_date <= self.checkin_date:
            raise ValueError("checkout_date must be after checkin_date")
        return self

    @property
    def occupies_capacity(self) -> bool:
        return self.status != BookingStatus.CANCELED


class Blackout(BaseModel):
    """Inclusive range of days closed for maintenance or special events."""

    model_config = ConfigDict(frozen=True)

    property: Property
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_dates(self) -> "Blackout":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start
