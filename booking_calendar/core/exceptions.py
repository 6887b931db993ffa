class BookingCalendarError(Exception):
    """Base error for the booking calendar engine."""


class InvalidDateInput(BookingCalendarError, ValueError):
    """Raised when a raw date value cannot be parsed into a calendar day."""

    def __init__(self, value: object, reason: str = "unrecognised date format"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid date input {value!r}: {reason}")
