"""
Tests for the check-in / check-out picking cycle
"""
from datetime import date, timedelta

import pytest

from booking_calendar.models import SelectionState
from booking_calendar.schemas.availability import DateRange
from booking_calendar.services.date_selection import (
    RANGE_TRANSITIONS,
    SINGLE_DATE_TRANSITIONS,
    DateSelectionStateMachine,
)

SAT, MON = date(2026, 1, 3), date(2026, 1, 5)
THU_NEXT = date(2026, 1, 8)

EMPTY = DateRange()


@pytest.fixture
def machine(engine):
    return DateSelectionStateMachine(engine)


@pytest.fixture
def ctx(make_context):
    return make_context()


class TestPickStart:
    def test_first_pick_sets_start(self, machine, ctx):
        state, selection = machine.pick(SelectionState.SET_START, EMPTY, MON, ctx)

        assert state == SelectionState.SET_END
        assert selection == DateRange(start=MON)

    def test_disabled_day_is_ignored(self, machine, ctx):
        state, selection = machine.pick(SelectionState.SET_START, EMPTY, SAT, ctx)

        assert state == SelectionState.SET_START
        assert selection == EMPTY

    def test_reset_behaves_like_set_start(self, machine, ctx):
        state, selection = machine.pick(SelectionState.RESET, EMPTY, MON, ctx)

        assert state == SelectionState.SET_END
        assert selection == DateRange(start=MON)

    def test_set_end_without_start_picks_start(self, machine, ctx):
        state, selection = machine.pick(SelectionState.SET_END, EMPTY, MON, ctx)

        assert state == SelectionState.SET_END
        assert selection == DateRange(start=MON)


class TestPickEnd:
    def test_valid_end_completes_range(self, machine, ctx):
        state, selection = machine.pick(
            SelectionState.SET_END, DateRange(start=MON), THU_NEXT, ctx
        )

        assert state == SelectionState.SET_START
        assert selection == DateRange(start=MON, end=THU_NEXT)
        assert selection.nights == 3

    def test_invalid_end_is_a_no_op(self, machine, ctx):
        """Five nights exceed the Tahoe limit"""
        current = DateRange(start=MON)
        state, selection = machine.pick(SelectionState.SET_END, current, date(2026, 1, 10), ctx)

        assert state == SelectionState.SET_END
        assert selection == current

    def test_same_day_twice_clears_selection(self, machine, ctx):
        state, selection = machine.pick(SelectionState.SET_START, EMPTY, MON, ctx)
        state, selection = machine.pick(state, selection, MON, ctx)

        assert state == SelectionState.SET_START
        assert selection == EMPTY

    @pytest.mark.parametrize("day", [MON, SAT, date(2025, 12, 31)])
    def test_same_day_twice_always_ends_empty(self, machine, ctx, day):
        """Holds for disabled days as well: nothing is picked, picking starts over"""
        state, selection = machine.pick(SelectionState.SET_START, EMPTY, day, ctx)
        state, selection = machine.pick(SelectionState.SET_END, selection, day, ctx)

        assert state == SelectionState.SET_START
        assert selection == EMPTY

    def test_rejected_pick_without_start_returns_to_set_start(self, machine, ctx):
        state, selection = machine.pick(SelectionState.SET_END, EMPTY, SAT, ctx)

        assert state == SelectionState.SET_START
        assert selection == EMPTY

    def test_earlier_day_becomes_new_start(self, machine, ctx):
        state, selection = machine.pick(
            SelectionState.SET_END, DateRange(start=THU_NEXT), MON, ctx
        )

        assert state == SelectionState.SET_END
        assert selection == DateRange(start=MON)

    def test_earlier_disabled_day_is_ignored(self, machine, ctx):
        current = DateRange(start=THU_NEXT)
        state, selection = machine.pick(SelectionState.SET_END, current, SAT, ctx)

        assert state == SelectionState.SET_END
        assert selection == current

    @pytest.mark.parametrize("offset", range(-4, 8))
    def test_committed_ranges_are_ordered(self, machine, ctx, offset):
        day = MON + timedelta(days=offset)
        _, selection = machine.pick(SelectionState.SET_END, DateRange(start=MON), day, ctx)

        if selection.is_complete:
            assert selection.start <= selection.end


class TestSingleDate:
    def test_pick_sets_both_ends(self, engine, ctx):
        machine = DateSelectionStateMachine(engine, SINGLE_DATE_TRANSITIONS)
        state, selection = machine.pick(SelectionState.SET_START, EMPTY, MON, ctx)

        assert machine.single_date
        assert state == SelectionState.SET_START
        assert selection == DateRange(start=MON, end=MON)

    def test_never_leaves_set_start(self, engine, ctx):
        machine = DateSelectionStateMachine(engine, SINGLE_DATE_TRANSITIONS)
        state, selection = SelectionState.SET_START, EMPTY
        for day in (MON, THU_NEXT, date(2026, 1, 6)):
            state, selection = machine.pick(state, selection, day, ctx)
            assert state == SelectionState.SET_START
            assert selection == DateRange(start=day, end=day)


class TestTransitions:
    def test_range_cycle_collapses_reset(self, machine):
        assert not machine.single_date
        assert machine.advance(SelectionState.SET_START) == SelectionState.SET_END
        assert machine.advance(SelectionState.SET_END) == SelectionState.SET_START
        assert machine.advance(SelectionState.RESET) == SelectionState.SET_START

    def test_transition_table_must_be_complete(self, engine):
        table = dict(RANGE_TRANSITIONS)
        del table[SelectionState.RESET]

        with pytest.raises(ValueError):
            DateSelectionStateMachine(engine, table)

    def test_reset_must_lead_somewhere(self, engine):
        table = dict(RANGE_TRANSITIONS)
        table[SelectionState.RESET] = SelectionState.RESET

        with pytest.raises(ValueError):
            DateSelectionStateMachine(engine, table)


class TestPreviewEnd:
    def test_valid_hover(self, machine, ctx):
        assert machine.preview_end(SelectionState.SET_END, DateRange(start=MON), THU_NEXT, ctx) == THU_NEXT

    def test_invalid_hover(self, machine, ctx):
        assert machine.preview_end(
            SelectionState.SET_END, DateRange(start=MON), date(2026, 1, 10), ctx
        ) is None

    def test_hover_before_start(self, machine, ctx):
        assert machine.preview_end(
            SelectionState.SET_END, DateRange(start=MON), date(2026, 1, 4), ctx
        ) is None

    def test_no_preview_while_picking_start(self, machine, ctx):
        assert machine.preview_end(SelectionState.SET_START, EMPTY, THU_NEXT, ctx) is None


class TestResetAndResume:
    def test_reset(self, machine):
        assert machine.reset() == (SelectionState.SET_START, EMPTY)

    def test_resume_with_start_only(self, machine):
        assert machine.resume(DateRange(start=MON)) == (
            SelectionState.SET_END,
            DateRange(start=MON),
        )

    @pytest.mark.parametrize("selection", [EMPTY, DateRange(start=MON, end=THU_NEXT)])
    def test_resume_otherwise_picks_start(self, machine, selection):
        state, resumed = machine.resume(selection)

        assert state == SelectionState.SET_START
        assert resumed == selection
