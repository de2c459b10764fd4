"""Services for the calendar blueprint."""

from .events import (
    filter_sessions_by_pitch,
    process_sessions_for_calendar,
    selected_pitch_name,
)
from .reconcile import get_session, load_sessions, load_week_sessions
from .week import is_current_week, shift_week, start_of_week, week_end, week_label

__all__ = [
    "filter_sessions_by_pitch",
    "get_session",
    "is_current_week",
    "load_sessions",
    "load_week_sessions",
    "process_sessions_for_calendar",
    "selected_pitch_name",
    "shift_week",
    "start_of_week",
    "week_end",
    "week_label",
]
