"""Filter expressions for the session, group and transaction indices."""

from __future__ import annotations

import datetime
from collections.abc import Iterable
from typing import Optional

from pitchpro.constants import (
    INCOME_TRANSACTION_TYPE,
    WITHDRAWAL_TRANSACTION_TYPE,
)
from pitchpro.core.dates import end_of_day, to_epoch_ms

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
GROUP_STATUSES = ("Approved", "Pending", "Rejected")


def _date_bounds(
    field: str,
    start_date: Optional[datetime.datetime],
    end_date: Optional[datetime.datetime],
    tz: datetime.tzinfo | None,
) -> list[str]:
    bounds = []
    if start_date:
        bounds.append(f"{field} >= {to_epoch_ms(start_date, tz)}")
    if end_date:
        bounds.append(f"{field} <= {to_epoch_ms(end_of_day(end_date), tz)}")
    return bounds


def sessions_filter(
    organization_id: str,
    start_date: Optional[datetime.datetime] = None,
    end_date: Optional[datetime.datetime] = None,
    tz: datetime.tzinfo | None = None,
) -> str:
    """Sessions of one organization, optionally between two dates.

    ``session_date`` is indexed in epoch milliseconds and the end date covers
    its whole day.
    """
    filters = [f"pitch.organization_ref:organizations/{organization_id}"]
    filters += _date_bounds("session_date", start_date, end_date, tz)
    return " AND ".join(filters)


def groups_filter(
    organization_id: str,
    status: Optional[str] = None,
    days: Optional[Iterable[str]] = None,
) -> str:
    """Groups of one organization; ``days`` match groups playing on any of them."""
    filters = [f"organization_ref:organizations/{organization_id}"]
    if status:
        filters.append(f"status:{status}")
    days = [day for day in days or [] if day]
    if days:
        filters.append(
            "(" + " OR ".join(f"session_time.days:{day}" for day in days) + ")"
        )
    return " AND ".join(filters)


def transactions_filter(
    organization_id: str,
    start_date: Optional[datetime.datetime] = None,
    end_date: Optional[datetime.datetime] = None,
    tz: datetime.tzinfo | None = None,
) -> str:
    """Session payments and withdrawals of one organization."""
    filters = [
        f'organization_ref:"organizations/{organization_id}"',
        f'(type:"{INCOME_TRANSACTION_TYPE}" OR type:"{WITHDRAWAL_TRANSACTION_TYPE}")',
    ]
    filters += _date_bounds("transaction_date", start_date, end_date, tz)
    return " AND ".join(filters)
