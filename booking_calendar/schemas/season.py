from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from booking_calendar.models import Property


class Season(BaseModel):
    """
    Recurring policy window for a property.

    Only month/day of start_date and end_date matter: a season repeats every
    year. When the start month is later than the end month the season spans
    the new year (e.g. Nov 1 - Apr 30).
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(max_length=255)
    property: Property
    start_date: date
    end_date: date
    max_nights: Optional[int] = Field(default=None, ge=1)
    # None or 0 means no limit
    advance_booking_days: Optional[int] = Field(default=None, ge=0)
    is_default: bool = False

    @model_validator(mode="after")
    def check_date_range(self) -> "Season":
        spans_years = self.start_date.month > self.end_date.month
        if not spans_years and self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self

    @property
    def spans_years(self) -> bool:
        return self.start_date.month > self.end_date.month

    @property
    def has_booking_window(self) -> bool:
        return bool(self.advance_booking_days)

    def covers(self, day: date) -> bool:
        key = (day.month, day.day)
        start = (self.start_date.month, self.start_date.day)
        end = (self.end_date.month, self.end_date.day)

        if self.spans_years:
            return key >= start or key <= end
        return start <= key <= end
