"""Turn session records into events for the week grid."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Sequence
from typing import Optional

from pitchpro.constants import (
    CALENDAR_VISIBLE_STATUSES,
    COMPLETED_EVENT_BACKGROUND,
    COMPLETED_EVENT_BORDER,
    EVENT_COLOR,
)
from pitchpro.organization.models import Pitch
from pitchpro.utils import format_time_range

from ..models import CalendarEvent, ExtendedProps, SessionRecord, TimeOfDay

logger = logging.getLogger(__name__)


def is_valid_session(session: SessionRecord) -> bool:
    """Only confirmed or completed sessions with a date and times are shown."""
    if session.status not in CALENDAR_VISIBLE_STATUSES:
        return False
    return bool(session.session_date and session.start_time and session.end_time)


def session_type_label(session: SessionRecord) -> str:
    if session.session_type == "PermanentSession":
        return f"Session - Ksh {session.collected_amount or 0:.0f}"
    if session.session_type == "PermanentWeekly":
        return "Weekly"
    return "Monthly"


def session_datetime(
    session_date: datetime.datetime, time: TimeOfDay
) -> datetime.datetime:
    return session_date.replace(
        hour=time.hour, minute=time.minute, second=0, microsecond=0
    )


def transform_session_to_event(session: SessionRecord) -> CalendarEvent:
    """Lay a session out as a calendar event.

    A session whose end is not after its start runs past midnight and ends on
    the following day.
    """
    start = session_datetime(session.session_date, session.start_time)
    end = session_datetime(session.session_date, session.end_time)
    if end <= start:
        end += datetime.timedelta(days=1)

    completed = session.status == "Completed"
    type_label = session_type_label(session)
    time_label = format_time_range(start, end)

    return CalendarEvent(
        id=session.id,
        start=start.isoformat(),
        end=end.isoformat(),
        title=(
            f"{session.owner_name}\n{type_label}\n{time_label}\n"
            f"Status: {session.status}"
        ),
        backgroundColor=COMPLETED_EVENT_BACKGROUND if completed else EVENT_COLOR,
        borderColor=COMPLETED_EVENT_BORDER if completed else EVENT_COLOR,
        textColor="#000000" if completed else "#FFFFFF",
        extendedProps=ExtendedProps(
            sessionId=session.id,
            ownerName=session.owner_name,
            sessionType=type_label,
            status=session.status,
            timeLabel=time_label,
            amount=session.collected_amount,
        ),
    )


def process_sessions_for_calendar(
    sessions: Iterable[SessionRecord],
) -> list[CalendarEvent]:
    events = []
    for session in sessions:
        if not is_valid_session(session):
            continue
        try:
            events.append(transform_session_to_event(session))
        except (TypeError, ValueError) as e:
            logger.error(f"Error transforming session {session.id}: {e}")
    return events


def selected_pitch_name(
    pitches: Sequence[Pitch], requested: Optional[str] = None
) -> Optional[str]:
    """Return the pitch to filter by, defaulting to the first pitch.

    Returns None when there is nothing to choose between.
    """
    if len(pitches) <= 1:
        return None
    names = [pitch.name for pitch in pitches]
    if requested in names:
        return requested
    return names[0]


def filter_sessions_by_pitch(
    sessions: Iterable[SessionRecord], pitch_name: Optional[str]
) -> list[SessionRecord]:
    if not pitch_name:
        return list(sessions)
    return [session for session in sessions if session.pitch_name == pitch_name]
