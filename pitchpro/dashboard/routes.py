"""Routes for the dashboard blueprint."""

from __future__ import annotations

import json
import queue
from typing import Any

from firebase_admin import firestore
from flask import Response, current_app, jsonify, request

from pitchpro.auth.decorators import login_required
from pitchpro.core.dates import get_timezone, now_local, range_from_params
from pitchpro.organization.decorators import organization_required

from . import bp
from .services import (
    DashboardStream,
    analytics_payload,
    dashboard_payload,
    load_dashboard_data,
)

KEEPALIVE_SECONDS = 15


@bp.route("/", methods=["GET"])
@login_required
@organization_required
def index(organization_id: str) -> Any:
    """KPI cards and charts for the selected organization."""
    tz = get_timezone(current_app.config.get("DASHBOARD_TIMEZONE"))
    db = firestore.client()
    state = load_dashboard_data(db, organization_id, tz)
    return jsonify(dashboard_payload(state, now_local(tz)))


@bp.route("/analytics", methods=["GET"])
@login_required
@organization_required
def analytics(organization_id: str) -> Any:
    """Month-bucketed series for a date range, optionally for one pitch."""
    tz = get_timezone(current_app.config.get("DASHBOARD_TIMEZONE"))
    now = now_local(tz)
    date_range = range_from_params(
        request.args.get("range") or None,
        request.args.get("start"),
        request.args.get("end"),
        now,
    )
    db = firestore.client()
    state = load_dashboard_data(db, organization_id, tz)
    return jsonify(
        analytics_payload(state, date_range, now, request.args.get("pitch") or None)
    )


@bp.route("/dashboard/stream", methods=["GET"])
@login_required
@organization_required
def stream(organization_id: str) -> Response:
    """Push a fresh dashboard payload every time a subscription fires."""
    tz = get_timezone(current_app.config.get("DASHBOARD_TIMEZONE"))
    updates: queue.Queue = queue.Queue()
    dashboard_stream = DashboardStream(firestore.client(), on_change=updates.put, tz=tz)
    current_app.logger.info(f"Opening dashboard stream for {organization_id}")

    def generate():
        with dashboard_stream:
            dashboard_stream.switch(organization_id)
            while True:
                try:
                    state = updates.get(timeout=KEEPALIVE_SECONDS)
                except queue.Empty:
                    yield ": keep-alive\n\n"
                    continue
                payload = dashboard_payload(state, now_local(tz))
                yield f"data: {json.dumps(payload)}\n\n"

    return Response(generate(), mimetype="text/event-stream")
