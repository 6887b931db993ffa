import logging
from datetime import date
from typing import Mapping, Optional

from booking_calendar.models import SelectionState
from booking_calendar.schemas.availability import DateRange
from booking_calendar.services.availability_rules import (
    AvailabilityRuleEngine,
    RuleContext,
)

logger = logging.getLogger(__name__)

RANGE_TRANSITIONS = {
    SelectionState.SET_START: SelectionState.SET_END,
    SelectionState.SET_END: SelectionState.RESET,
    SelectionState.RESET: SelectionState.SET_START,
}

SINGLE_DATE_TRANSITIONS = {
    SelectionState.SET_START: SelectionState.SET_START,
    SelectionState.SET_END: SelectionState.SET_START,
    SelectionState.RESET: SelectionState.SET_START,
}

Selection = tuple[SelectionState, DateRange]


class DateSelectionStateMachine:
    """
    Check-in / check-out picking cycle.

    Every method returns a new (state, range) pair; nothing is stored between
    calls. The `ctx` passed to `pick` / `preview_end` supplies the booking
    rules; its state and range_start are overridden from the arguments.
    """

    def __init__(
        self,
        engine: AvailabilityRuleEngine,
        transitions: Mapping[SelectionState, SelectionState] = RANGE_TRANSITIONS,
    ):
        missing = set(SelectionState) - set(transitions)
        if missing:
            raise ValueError(f"transition table has no entry for {sorted(s.value for s in missing)}")
        if transitions[SelectionState.RESET] is SelectionState.RESET:
            raise ValueError("RESET must lead to another state")

        self.engine = engine
        self.transitions = dict(transitions)

    @property
    def single_date(self) -> bool:
        return self.transitions[SelectionState.SET_START] is SelectionState.SET_START

    def advance(self, state: SelectionState) -> SelectionState:
        next_state = self.transitions[state]
        # RESET is transient
        if next_state is SelectionState.RESET:
            next_state = self.transitions[SelectionState.RESET]
        return next_state

    def pick(
        self,
        state: SelectionState,
        date_range: DateRange,
        day: date,
        ctx: RuleContext,
    ) -> Selection:
        if state is SelectionState.SET_END and date_range.start is not None:
            return self._pick_end(state, date_range, day, ctx)
        return self._pick_start(state, date_range, day, ctx)

    def preview_end(
        self,
        state: SelectionState,
        date_range: DateRange,
        hovered: date,
        ctx: RuleContext,
    ) -> Optional[date]:
        """Would-be checkout for a hovered day, or None. Never changes state."""
        start = date_range.start
        if state is not SelectionState.SET_END or start is None or hovered < start:
            return None

        if self.engine.is_disabled(hovered, ctx.with_selection(SelectionState.SET_END, start)):
            return None
        if not self.engine.is_range_valid(start, hovered, ctx):
            return None
        return hovered

    def reset(self) -> Selection:
        return SelectionState.SET_START, DateRange()

    def resume(self, date_range: DateRange) -> Selection:
        """Position to continue from when a calendar is mounted with a selection."""
        return SelectionState.for_range(date_range.start, date_range.end), date_range

    def _pick_start(
        self,
        state: SelectionState,
        date_range: DateRange,
        day: date,
        ctx: RuleContext,
    ) -> Selection:
        if self.engine.is_disabled(day, ctx.with_selection(SelectionState.SET_START, None)):
            if date_range.start is None:
                return SelectionState.SET_START, date_range
            return state, date_range

        if self.single_date:
            return self.advance(SelectionState.SET_START), DateRange(start=day, end=day)
        return self.advance(SelectionState.SET_START), DateRange(start=day)

    def _pick_end(
        self,
        state: SelectionState,
        date_range: DateRange,
        day: date,
        ctx: RuleContext,
    ) -> Selection:
        start = date_range.start

        if day == start:
            # Second click on the check-in day clears the selection
            return SelectionState.SET_START, DateRange()

        if day < start:
            if self.engine.is_disabled(day, ctx.with_selection(SelectionState.SET_START, None)):
                return state, date_range
            return SelectionState.SET_END, DateRange(start=day)

        if not self.engine.is_range_valid(start, day, ctx):
            logger.debug(f"Rejected range {start.isoformat()} - {day.isoformat()}")
            return state, date_range

        return self.advance(SelectionState.SET_END), DateRange(start=start, end=day)
