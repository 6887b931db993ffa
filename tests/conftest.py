"""
Pytest configuration for booking calendar tests
"""
import logging
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

# Ensure booking_calendar is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from booking_calendar.models import BookingMode, Property  # noqa: E402
from booking_calendar.schemas.availability import DayAvailability  # noqa: E402
from booking_calendar.schemas.season import Season  # noqa: E402
from booking_calendar.services.availability_rules import (  # noqa: E402
    AvailabilityRuleEngine,
    RuleContext,
)

# 2026-01-01 is a Thursday
TODAY = date(2026, 1, 1)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_day():
    """Factory for a fully open day, with optional overrides"""

    def _make(day: date, **overrides) -> DayAvailability:
        values = {
            "date": day,
            "spots_available": 12,
            "can_book_day": True,
            "can_book_buyout": True,
        }
        values.update(overrides)
        return DayAvailability(**values)

    return _make


@pytest.fixture
def open_availability(make_day):
    """Every day from Dec 1, 2025 to Mar 31, 2026 open for booking"""
    start, end = date(2025, 12, 1), date(2026, 3, 31)
    return {
        start + timedelta(days=i): make_day(start + timedelta(days=i))
        for i in range((end - start).days + 1)
    }


@pytest.fixture
def engine():
    return AvailabilityRuleEngine(max_nights_defaults={"tahoe": 4, "clear_lake": 30})


@pytest.fixture
def make_context(open_availability):
    """Factory for a RuleContext; defaults to Tahoe, day mode, everything open"""

    def _make(**overrides) -> RuleContext:
        values = {
            "min_date": TODAY,
            "today": TODAY,
            "property": Property.TAHOE,
            "mode": BookingMode.DAY,
            "availability": open_availability,
            "seasons": (),
        }
        values.update(overrides)
        return RuleContext(**values)

    return _make


@pytest.fixture
def winter_season():
    return Season(
        name="Winter",
        property=Property.TAHOE,
        start_date=date(2025, 11, 1),
        end_date=date(2026, 4, 30),
    )


@pytest.fixture
def summer_season():
    return Season(
        name="Summer",
        property=Property.TAHOE,
        start_date=date(2026, 5, 1),
        end_date=date(2026, 10, 31),
        advance_booking_days=180,
    )


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
