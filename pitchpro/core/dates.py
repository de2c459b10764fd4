"""Date helpers shared by the dashboard, calendar and search views."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Optional
from zoneinfo import ZoneInfo

from pitchpro.constants import DEFAULT_TIMEZONE
from pitchpro.errors import ValidationError

MONTH_NAMES = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]

RANGE_TYPES = ("All", "Yearly", "Monthly", "Weekly")


@dataclass(frozen=True)
class DateRange:
    """A possibly open-ended range of dates used to filter stats."""

    type: str = "All"
    start_date: Optional[datetime.datetime] = None
    end_date: Optional[datetime.datetime] = None

    def contains(self, value: datetime.datetime) -> bool:
        """Return True if ``value`` falls inside the range (bounds inclusive)."""
        return is_date_in_range(value, self.start_date, self.end_date)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }


def get_timezone(name: str | None = None) -> ZoneInfo:
    """Return the dashboard timezone."""
    return ZoneInfo(name or DEFAULT_TIMEZONE)


def now_local(tz: datetime.tzinfo | None = None) -> datetime.datetime:
    """Return the current wall-clock time in ``tz`` as a naive datetime."""
    return datetime.datetime.now(tz or get_timezone()).replace(tzinfo=None)


def to_local(
    value: datetime.datetime, tz: datetime.tzinfo | None = None
) -> datetime.datetime:
    """Convert a Firestore timestamp to a naive datetime in the dashboard timezone.

    Naive values are assumed to already be local.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(tz or get_timezone()).replace(tzinfo=None)


def coerce_datetime(
    value: Any, tz: datetime.tzinfo | None = None
) -> datetime.datetime | None:
    """Best-effort conversion of a stored date value to a local naive datetime.

    Accepts datetimes (including Firestore's ``DatetimeWithNanoseconds``),
    dates, ISO-8601 strings and epoch milliseconds. Returns None when the
    value cannot be interpreted.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return to_local(value, tz)
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return from_epoch_ms(value, tz)
    if isinstance(value, str):
        try:
            parsed = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return to_local(parsed, tz)
    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        return to_local(to_datetime(), tz)
    return None


def is_date_in_range(
    value: datetime.datetime,
    start_date: datetime.datetime | None,
    end_date: datetime.datetime | None,
) -> bool:
    """Check whether ``value`` lies within inclusive, possibly open, bounds."""
    within_start = start_date is None or value >= start_date
    within_end = end_date is None or value <= end_date
    return within_start and within_end


def start_of_day(value: datetime.datetime | datetime.date) -> datetime.datetime:
    return datetime.datetime(value.year, value.month, value.day)


def end_of_day(value: datetime.datetime | datetime.date) -> datetime.datetime:
    """Return the last representable instant of the day containing ``value``."""
    return datetime.datetime(value.year, value.month, value.day, 23, 59, 59, 999999)


def start_of_current_month(now: datetime.datetime) -> datetime.datetime:
    return datetime.datetime(now.year, now.month, 1)


def current_month_range(now: datetime.datetime) -> DateRange:
    """Month-to-date range; the open end means "up to now"."""
    return DateRange("Monthly", start_of_current_month(now), None)


def current_year_range(now: datetime.datetime) -> DateRange:
    return DateRange(
        "Yearly",
        datetime.datetime(now.year, 1, 1),
        datetime.datetime(now.year, 12, 31),
    )


def parse_date_param(value: str | None) -> datetime.datetime | None:
    """Parse a ``YYYY-MM-DD`` query parameter into a naive datetime."""
    if not value:
        return None
    try:
        parsed = datetime.date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value}") from e
    return start_of_day(parsed)


def range_from_params(
    range_type: str | None,
    start: str | None,
    end: str | None,
    now: datetime.datetime,
) -> DateRange:
    """Build a DateRange from request query parameters.

    Explicit ``start``/``end`` win over presets; an explicit end is made
    end-of-day inclusive.
    """
    if range_type is not None and range_type not in RANGE_TYPES:
        raise ValidationError(f"Unknown range type: {range_type}")

    start_date = parse_date_param(start)
    end_date = parse_date_param(end)
    if start_date or end_date:
        return DateRange(
            range_type or "All",
            start_date,
            end_of_day(end_date) if end_date else None,
        )

    if range_type == "Monthly":
        return current_month_range(now)
    if range_type == "Yearly" or range_type is None:
        return current_year_range(now)
    if range_type == "Weekly":
        week_start = start_of_day(now) - datetime.timedelta(days=now.weekday())
        return DateRange(
            "Weekly", week_start, end_of_day(week_start + datetime.timedelta(days=6))
        )
    return DateRange("All")


def to_epoch_ms(value: datetime.datetime, tz: datetime.tzinfo | None = None) -> int:
    """Convert a local naive datetime to epoch milliseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz or get_timezone())
    return int(value.timestamp() * 1000)


def from_epoch_ms(ms: float, tz: datetime.tzinfo | None = None) -> datetime.datetime:
    """Convert epoch milliseconds to a local naive datetime."""
    aware = datetime.datetime.fromtimestamp(ms / 1000, tz=datetime.timezone.utc)
    return to_local(aware, tz)
