import logging
from datetime import date, timedelta
from typing import Optional

from booking_calendar.core.config import settings
from booking_calendar.domain.calendar import (
    CalendarGridBuilder,
    MonthGrid,
    beginning_of_month,
    end_of_month,
)
from booking_calendar.models import BookingMode, Property, SelectionState
from booking_calendar.schemas.availability import DateRange, DayAvailability, DayVerdict
from booking_calendar.schemas.sources import (
    AvailabilitySource,
    CommitCallback,
    SeasonRepository,
)
from booking_calendar.services.availability_rules import (
    AvailabilityRuleEngine,
    RuleContext,
)
from booking_calendar.services.date_selection import DateSelectionStateMachine
from booking_calendar.services.season_service import calculate_max_booking_date
from booking_calendar.utils.validators import parse_optional_date

logger = logging.getLogger(__name__)


class CalendarSession:
    """
    One mounted availability calendar.

    Owns the visible month, the current selection and the availability
    snapshot the rules are evaluated against. The snapshot is replaced, never
    patched, when navigation leaves the loaded window or the booking mode
    changes.
    """

    def __init__(
        self,
        property: Property,
        source: AvailabilitySource,
        season_repository: SeasonRepository,
        today: Optional[date] = None,
        mode: BookingMode = BookingMode.DAY,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
        allow_saturdays: bool = False,
        guests: int = 1,
        on_commit: Optional[CommitCallback] = None,
        builder: Optional[CalendarGridBuilder] = None,
        engine: Optional[AvailabilityRuleEngine] = None,
        machine: Optional[DateSelectionStateMachine] = None,
        buffer_days: Optional[int] = None,
    ):
        self.property = Property(property)
        self.source = source
        self.today = today or date.today()
        self.mode = BookingMode(mode)
        self.min_date = min_date or self.today
        self.allow_saturdays = allow_saturdays
        self.guests = guests
        self.on_commit = on_commit
        self.buffer = timedelta(
            days=buffer_days if buffer_days is not None else settings.availability_buffer_days
        )

        self.seasons = tuple(season_repository.list(self.property))
        self.max_date = (
            max_date
            if max_date is not None
            else calculate_max_booking_date(self.seasons, self.today)
        )

        self.builder = builder or CalendarGridBuilder(settings.week_start_day)
        self.engine = engine or AvailabilityRuleEngine()
        self.machine = machine or DateSelectionStateMachine(self.engine)

        self.state, self.selection = self.machine.reset()
        self.hover_end: Optional[date] = None
        self.current: MonthGrid = self.builder.build_month(self.today)
        self.availability: dict[date, DayAvailability] = {}
        self.loaded_range: Optional[tuple[date, date]] = None

        self._ensure_availability(force=True)

    # --- selection ---

    def resume(self, start: object = None, end: object = None) -> DateRange:
        """Restore a selection, e.g. from form values, and continue picking from it."""
        selection = DateRange(start=parse_optional_date(start), end=parse_optional_date(end))
        self.state, self.selection = self.machine.resume(selection)
        self.hover_end = None

        if selection.start is not None:
            self.current = self.builder.build_month(selection.start)
        self._ensure_availability()
        return self.selection

    def context(self) -> RuleContext:
        return RuleContext(
            min_date=self.min_date,
            max_date=self.max_date,
            range_start=self.selection.start,
            state=self.state,
            property=self.property,
            today=self.today,
            mode=self.mode,
            availability=self.availability,
            seasons=self.seasons,
            allow_saturdays=self.allow_saturdays,
            guests=self.guests,
        )

    def pick(self, day: date) -> DateRange:
        previous = self.selection
        self.state, self.selection = self.machine.pick(
            self.state, self.selection, day, self.context()
        )

        if self.selection != previous:
            self.hover_end = None
            if self.selection.is_complete:
                self._commit()
        return self.selection

    def hover(self, day: date) -> Optional[date]:
        self.hover_end = self.machine.preview_end(
            self.state, self.selection, day, self.context()
        )
        return self.hover_end

    def leave(self) -> None:
        self.hover_end = None

    def reset_dates(self) -> None:
        self.state, self.selection = self.machine.reset()
        self.hover_end = None

    @property
    def highlighted(self) -> DateRange:
        """Committed selection, or the hover preview while picking checkout."""
        if self.state is SelectionState.SET_END and self.hover_end is not None:
            return DateRange(start=self.selection.start, end=self.hover_end)
        return self.selection

    # --- navigation ---

    def next_month(self) -> MonthGrid:
        return self._show(self.builder.next_month(self.current.anchor))

    def prev_month(self) -> MonthGrid:
        return self._show(self.builder.prev_month(self.current.anchor))

    def go_today(self) -> MonthGrid:
        return self._show(self.today)

    def set_mode(self, mode: BookingMode) -> None:
        mode = BookingMode(mode)
        if mode == self.mode:
            return
        self.mode = mode
        self._ensure_availability(force=True)

    def verdicts(self) -> dict[date, DayVerdict]:
        return self.engine.evaluate_month(self.current.days(), self.context())

    # --- availability snapshot ---

    def availability_window(self) -> tuple[date, date]:
        month_start = beginning_of_month(self.current.anchor)
        month_end = end_of_month(self.current.anchor)

        start = month_start - self.buffer
        end = month_end + self.buffer

        if self.selection.start is not None:
            last_selected = self.selection.end or self.selection.start
            start = min(start, self.selection.start - self.buffer)
            end = max(end, last_selected + self.buffer)

        # Nothing before today can be booked
        start = max(start, self.today)
        return start, max(start, end)

    def _show(self, anchor: date) -> MonthGrid:
        self.current = self.builder.build_month(anchor)
        self._ensure_availability()
        return self.current

    def _covers_visible_month(self) -> bool:
        needed_start = max(beginning_of_month(self.current.anchor), self.today)
        needed_end = end_of_month(self.current.anchor)
        if needed_end < needed_start:
            # Past month, nothing left to book
            return True
        if self.loaded_range is None:
            return False
        loaded_start, loaded_end = self.loaded_range
        return loaded_start <= needed_start and loaded_end >= needed_end

    def _ensure_availability(self, force: bool = False) -> None:
        if not force and self._covers_visible_month():
            return

        start, end = self.availability_window()
        logger.info(
            f"Loading {self.property.value} availability {start} - {end} ({self.mode.value} mode)"
        )
        self.availability = dict(self.source.fetch(start, end, self.property))
        self.loaded_range = (start, end)

    def _commit(self) -> None:
        logger.info(
            f"Selected {self.property.value} stay {self.selection.start} - {self.selection.end}"
        )
        if self.on_commit is not None:
            self.on_commit(self.selection)
