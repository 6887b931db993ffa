import calendar
import datetime
from dataclasses import dataclass

WEEKDAYS = {
    "monday": calendar.MONDAY,
    "tuesday": calendar.TUESDAY,
    "wednesday": calendar.WEDNESDAY,
    "thursday": calendar.THURSDAY,
    "friday": calendar.FRIDAY,
    "saturday": calendar.SATURDAY,
    "sunday": calendar.SUNDAY,
}


def month_title(day: datetime.date) -> str:
    return day.strftime("%B %Y")


def beginning_of_month(day: datetime.date) -> datetime.date:
    return day.replace(day=1)


def end_of_month(day: datetime.date) -> datetime.date:
    _, days_in_month = calendar.monthrange(day.year, day.month)
    return day.replace(day=days_in_month)


def beginning_of_week(day: datetime.date, week_start: int) -> datetime.date:
    return day - datetime.timedelta(days=(day.weekday() - week_start) % 7)


def end_of_week(day: datetime.date, week_start: int) -> datetime.date:
    return beginning_of_week(day, week_start) + datetime.timedelta(days=6)


def parse_week_start(value: str | int) -> int:
    if isinstance(value, int):
        if not 0 <= value <= 6:
            raise ValueError(f"week start must be 0..6, got {value}")
        return value
    try:
        return WEEKDAYS[value.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown week start day: {value!r}") from None


@dataclass(frozen=True)
class MonthGrid:
    anchor: datetime.date
    month_label: str
    week_rows: tuple[tuple[datetime.date, ...], ...]

    def days(self) -> list[datetime.date]:
        return [day for row in self.week_rows for day in row]

    def is_other_month(self, day: datetime.date) -> bool:
        return (day.year, day.month) != (self.anchor.year, self.anchor.month)

    @property
    def first_day(self) -> datetime.date:
        return self.week_rows[0][0]

    @property
    def last_day(self) -> datetime.date:
        return self.week_rows[-1][-1]


class CalendarGridBuilder:
    """Month grid date math. Knows nothing about selection or availability."""

    def __init__(self, week_start: int = calendar.SUNDAY):
        self.week_start = parse_week_start(week_start)

    def build_month(self, anchor: datetime.date) -> MonthGrid:
        first = beginning_of_week(beginning_of_month(anchor), self.week_start)
        last = end_of_week(end_of_month(anchor), self.week_start)

        total = (last - first).days + 1
        days = [first + datetime.timedelta(days=i) for i in range(total)]
        rows = tuple(tuple(days[i:i + 7]) for i in range(0, total, 7))

        return MonthGrid(anchor=anchor, month_label=month_title(anchor), week_rows=rows)

    @staticmethod
    def next_month(anchor: datetime.date) -> datetime.date:
        return (datetime.date(anchor.year, anchor.month, 28) + datetime.timedelta(days=4)).replace(
            day=1
        )

    @staticmethod
    def prev_month(anchor: datetime.date) -> datetime.date:
        return (beginning_of_month(anchor) - datetime.timedelta(days=1)).replace(day=1)

    def today(self, today: datetime.date | None = None) -> MonthGrid:
        return self.build_month(today or datetime.date.today())
