"""Routes for the calendar blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, jsonify, request

from pitchpro.auth.decorators import login_required
from pitchpro.core.dates import (
    current_month_range,
    get_timezone,
    now_local,
    parse_date_param,
)
from pitchpro.dashboard.services import get_pitches
from pitchpro.errors import ValidationError
from pitchpro.organization.decorators import organization_required

from . import bp
from .services import (
    filter_sessions_by_pitch,
    get_session,
    is_current_week,
    load_sessions,
    load_week_sessions,
    process_sessions_for_calendar,
    selected_pitch_name,
    shift_week,
    start_of_week,
    week_end,
    week_label,
)


def _batch_size() -> int:
    return int(current_app.config.get("SESSION_FETCH_BATCH_SIZE") or 50)


@bp.route("/calendar", methods=["GET"])
@login_required
@organization_required
def week_view(organization_id: str) -> Any:
    """Sessions of one week laid out as calendar events.

    ``week`` is any day of the week to show (``YYYY-MM-DD``, default today)
    and ``offset`` moves that many weeks from it.
    """
    tz = get_timezone(current_app.config.get("DASHBOARD_TIMEZONE"))
    now = now_local(tz)
    try:
        offset = int(request.args.get("offset", 0))
    except ValueError as e:
        raise ValidationError("offset must be an integer.") from e

    week_start = shift_week(
        start_of_week(parse_date_param(request.args.get("week")) or now), offset
    )

    db = firestore.client()
    pitches = get_pitches(db, organization_id)
    sessions = load_week_sessions(
        db, organization_id, pitches, week_start, tz, _batch_size()
    )

    pitch_name = selected_pitch_name(pitches, request.args.get("pitch"))
    sessions = filter_sessions_by_pitch(sessions, pitch_name)
    events = process_sessions_for_calendar(sessions)
    current_app.logger.info(
        f"Calendar week {week_start.date()} for {organization_id}: "
        f"{len(events)} events from {len(sessions)} sessions"
    )

    return jsonify(
        {
            "week_start": week_start.date().isoformat(),
            "week_end": week_end(week_start).date().isoformat(),
            "week_label": week_label(week_start),
            "is_current_week": is_current_week(week_start, now),
            "previous_week": shift_week(week_start, -1).date().isoformat(),
            "next_week": shift_week(week_start, 1).date().isoformat(),
            "pitches": [pitch.to_dict() for pitch in pitches],
            "show_pitch_filter": len(pitches) > 1,
            "selected_pitch": pitch_name,
            "events": events,
        }
    )


@bp.route("/calendar/sessions", methods=["GET"])
@login_required
@organization_required
def session_list(organization_id: str) -> Any:
    """Every reconciled session between ``start`` and ``end``, newest first.

    Defaults to the current month.
    """
    tz = get_timezone(current_app.config.get("DASHBOARD_TIMEZONE"))
    now = now_local(tz)
    default_range = current_month_range(now)
    start = parse_date_param(request.args.get("start")) or default_range.start_date
    end = parse_date_param(request.args.get("end")) or now
    if end < start:
        raise ValidationError("end must not be before start.")

    db = firestore.client()
    pitches = get_pitches(db, organization_id)
    sessions = load_sessions(
        db, organization_id, pitches, start, end, tz, _batch_size()
    )
    return jsonify(
        {
            "start": start.date().isoformat(),
            "end": end.date().isoformat(),
            "sessions": [session.to_dict() for session in sessions],
        }
    )


@bp.route("/sessions/<session_id>", methods=["GET"])
@login_required
@organization_required
def session_detail(session_id: str, organization_id: str) -> Any:
    tz = get_timezone(current_app.config.get("DASHBOARD_TIMEZONE"))
    db = firestore.client()
    session = get_session(db, session_id, organization_id, tz)
    return jsonify(session.to_dict())
