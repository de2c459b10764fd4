"""Formatting helpers shared by the views."""

from __future__ import annotations

import datetime
import re

from .constants import CURRENCY_PREFIX


def format_currency(amount: float | None) -> str:
    """Format an amount in Kenyan Shillings, e.g. ``Kshs 1,234.50``."""
    return f"{CURRENCY_PREFIX} {amount or 0:,.2f}"


def format_clock(hour: int, minute: int) -> str:
    """Format a wall-clock time as ``h:mm AM``."""
    display_hour = hour % 12 or 12
    period = "PM" if hour >= 12 else "AM"  # noqa: PLR2004
    return f"{display_hour}:{minute:02d} {period}"


def format_time(value: datetime.datetime) -> str:
    return format_clock(value.hour, value.minute)


def format_time_range(start: datetime.datetime, end: datetime.datetime) -> str:
    return f"{format_time(start)} - {format_time(end)}"


def format_phone_number(phone: str | None) -> str:
    """Format a Kenyan phone number as ``+254 XXX XXX XXX``.

    Numbers that are not recognizably Kenyan are returned unchanged.
    """
    if not phone:
        return ""
    digits = re.sub(r"\D", "", phone)
    if digits.startswith("254") and len(digits) == 12:  # noqa: PLR2004
        national = digits
    elif digits.startswith("0") and len(digits) == 10:  # noqa: PLR2004
        national = "254" + digits[1:]
    else:
        return phone
    return f"+{national[:3]} {national[3:6]} {national[6:9]} {national[9:]}"


def format_session_type(session_type: str) -> str:
    """Return the short label for a recurring session type."""
    if session_type == "PermanentWeekly":
        return "Weekly"
    if session_type == "PermanentMonthly":
        return "Monthly"
    return session_type
