"""Week navigation and the calendar documents a week needs."""

from __future__ import annotations

import datetime
from collections.abc import Iterable

from pitchpro.core.dates import MONTH_NAMES, end_of_day, start_of_day

DAYS_IN_WEEK = 7


def start_of_week(value: datetime.datetime | datetime.date) -> datetime.datetime:
    """Return midnight of the Monday on or before ``value``."""
    day = start_of_day(value)
    return day - datetime.timedelta(days=day.weekday())


def shift_week(
    week_start: datetime.datetime, offset_in_weeks: int
) -> datetime.datetime:
    return week_start + datetime.timedelta(weeks=offset_in_weeks)


def week_end(week_start: datetime.datetime) -> datetime.datetime:
    """Return the last instant of the Sunday closing the week."""
    return end_of_day(week_start + datetime.timedelta(days=DAYS_IN_WEEK - 1))


def week_label(week_start: datetime.datetime) -> str:
    """Format a week as e.g. ``Mar 3 - Mar 9``."""
    last_day = week_start + datetime.timedelta(days=DAYS_IN_WEEK - 1)
    return (
        f"{MONTH_NAMES[week_start.month - 1]} {week_start.day} - "
        f"{MONTH_NAMES[last_day.month - 1]} {last_day.day}"
    )


def is_current_week(week_start: datetime.datetime, now: datetime.datetime) -> bool:
    return start_of_week(now) == start_of_week(week_start)


def months_between(
    start: datetime.datetime | datetime.date, end: datetime.datetime | datetime.date
) -> list[tuple[int, int]]:
    """Every ``(month, year)`` touched by the inclusive range, in order."""
    months = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append((month, year))
        month += 1
        if month > 12:  # noqa: PLR2004
            month = 1
            year += 1
    return months


def required_months(week_start: datetime.datetime) -> list[tuple[int, int]]:
    """The one or two ``(month, year)`` pairs a week overlaps."""
    return months_between(
        week_start, week_start + datetime.timedelta(days=DAYS_IN_WEEK - 1)
    )


def calendar_document_ids(
    pitch_ids: Iterable[str], months: Iterable[tuple[int, int]]
) -> list[str]:
    """Build ``{pitchId}:{month}:{year}`` keys of ``sessionCalendar`` documents."""
    months = list(months)
    return [
        f"{pitch_id}:{month}:{year}" for pitch_id in pitch_ids for month, year in months
    ]
