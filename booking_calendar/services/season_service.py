import calendar
import logging
from datetime import date, timedelta
from typing import Mapping, Optional, Sequence

from booking_calendar.core.config import settings
from booking_calendar.models import Property
from booking_calendar.schemas.season import Season

logger = logging.getLogger(__name__)


def find_season_for_date(seasons: Sequence[Season], day: date) -> Optional[Season]:
    """First season covering the day. Seasons recur every year."""
    for season in seasons:
        if season.covers(day):
            return season
    return None


def max_nights_for(
    season: Optional[Season],
    property: Property,
    defaults: Optional[Mapping[str, int]] = None,
) -> Optional[int]:
    """
    Max stay for a check-in covered by `season`.

    Falls back to the property default when the season is missing or has no
    explicit limit. Returns None when neither is known; callers must treat
    that as "not bookable".
    """
    if season is not None and season.max_nights:
        return season.max_nights

    defaults = defaults if defaults is not None else settings.max_nights_defaults()
    value = defaults.get(Property(property).value)
    if value is None:
        logger.warning(f"No season and no max-nights fallback for property {property}")
    return value


def is_date_selectable(seasons: Sequence[Season], day: date, today: date) -> bool:
    """
    Advance booking window check.

    A date is selectable when its season has no limit, or when it falls within
    `advance_booking_days` of today.
    """
    season = find_season_for_date(seasons, day)
    if season is None or not season.has_booking_window:
        return True
    return day <= today + timedelta(days=season.advance_booking_days)


def season_date_range(season: Season, reference: date) -> tuple[date, date]:
    """Concrete start/end of the season occurrence around `reference`."""
    start = (season.start_date.month, season.start_date.day)
    end = (season.end_date.month, season.end_date.day)
    ref = (reference.month, reference.day)

    if season.spans_years:
        if ref <= end:
            # Later part of the season (Jan-Apr): started last year
            return _on(reference.year - 1, *start), _on(reference.year, *end)
        return _on(reference.year, *start), _on(reference.year + 1, *end)

    return _on(reference.year, *start), _on(reference.year, *end)


def next_season(seasons: Sequence[Season], reference: date) -> Optional[Season]:
    current = find_season_for_date(seasons, reference)
    if current is None or len(seasons) < 2:
        return None

    candidates = [
        (next_occurrence_start(season, reference), season)
        for season in seasons
        if season != current
    ]
    if not candidates:
        return None
    candidates.sort(key=lambda item: item[0])
    return candidates[0][1]


def next_occurrence_start(season: Season, reference: date) -> date:
    start = (season.start_date.month, season.start_date.day)
    end = (season.end_date.month, season.end_date.day)
    ref = (reference.month, reference.day)

    if season.spans_years:
        if ref <= end:
            candidate = _on(reference.year, *start)
            if candidate > reference:
                return candidate
        return _on(reference.year + 1, *start)

    if ref < start:
        return _on(reference.year, *start)
    return _on(reference.year + 1, *start)


def calculate_max_booking_date(
    seasons: Sequence[Season],
    today: date,
    horizon_days: Optional[int] = None,
) -> date:
    """
    Latest date a guest may book, given the season we are in today.

    With a limited current season the limit applies directly. Without one,
    bookings may run to the end of the current season, or further if the
    next season's own window already reaches beyond it.
    """
    current = find_season_for_date(seasons, today)

    if current is None:
        horizon = horizon_days if horizon_days is not None else settings.default_booking_horizon_days
        return today + timedelta(days=horizon)

    if current.has_booking_window:
        return today + timedelta(days=current.advance_booking_days)

    _, season_end = season_date_range(current, today)
    upcoming = next_season(seasons, today)

    if upcoming is not None and upcoming.has_booking_window:
        return max(season_end, today + timedelta(days=upcoming.advance_booking_days))
    return season_end


def _on(year: int, month: int, day: int) -> date:
    # Feb 29 seasons land on Feb 28 in common years
    if month == 2 and day == 29 and not calendar.isleap(year):
        day = 28
    return date(year, month, day)
