"""Routes for the search blueprint."""

from __future__ import annotations

from typing import Any, Optional

from flask import current_app, jsonify, request

from pitchpro.auth.decorators import login_required
from pitchpro.core.dates import get_timezone, parse_date_param
from pitchpro.errors import ValidationError
from pitchpro.organization.decorators import organization_required

from . import bp
from .client import SearchClient
from .filters import GROUP_STATUSES, WEEKDAYS
from .services import search_groups, search_sessions, search_transactions


def _int_arg(name: str, default: Optional[int] = None) -> Optional[int]:
    value = request.args.get(name)
    if value in (None, ""):
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValidationError(f"{name} must be an integer.") from e


def _search_args() -> dict[str, Any]:
    page = _int_arg("page", 0)
    if page < 0:
        raise ValidationError("page must not be negative.")
    return {
        "query": request.args.get("q", ""),
        "page": page,
        "hits_per_page": _int_arg("hitsPerPage"),
        "tz": get_timezone(current_app.config.get("DASHBOARD_TIMEZONE")),
    }


@bp.route("/sessions", methods=["GET"])
@login_required
@organization_required
def sessions(organization_id: str) -> Any:
    client = SearchClient.from_config(current_app.config)
    return jsonify(
        search_sessions(
            client,
            organization_id,
            start_date=parse_date_param(request.args.get("start")),
            end_date=parse_date_param(request.args.get("end")),
            index_name=current_app.config["SESSIONS_INDEX"],
            **_search_args(),
        )
    )


@bp.route("/groups", methods=["GET"])
@login_required
@organization_required
def groups(organization_id: str) -> Any:
    """Recurring groups, filtered by ``status`` and any of ``days``."""
    status = request.args.get("status") or None
    if status and status not in GROUP_STATUSES:
        raise ValidationError(f"Unknown group status: {status}")
    days = [day for day in request.args.getlist("days") if day]
    unknown = [day for day in days if day not in WEEKDAYS]
    if unknown:
        raise ValidationError(f"Unknown days: {', '.join(unknown)}")

    client = SearchClient.from_config(current_app.config)
    return jsonify(
        search_groups(
            client,
            organization_id,
            status=status,
            days=days,
            index_name=current_app.config["PERMANENT_SESSIONS_INDEX"],
            **_search_args(),
        )
    )


@bp.route("/finances", methods=["GET"])
@login_required
@organization_required
def finances(organization_id: str) -> Any:
    """Session payments and withdrawals with page totals."""
    client = SearchClient.from_config(current_app.config)
    return jsonify(
        search_transactions(
            client,
            organization_id,
            start_date=parse_date_param(request.args.get("start")),
            end_date=parse_date_param(request.args.get("end")),
            index_name=current_app.config["TRANSACTIONS_INDEX"],
            **_search_args(),
        )
    )
