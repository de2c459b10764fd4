"""Turn raw Firestore snapshots into dashboard models."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any

from pitchpro.core.dates import coerce_datetime, now_local
from pitchpro.core.references import reference_id
from pitchpro.organization.models import Organization, Pitch

from ..models import DayStat, StatsRecord

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot


def _first(data: dict[str, Any], *keys: str) -> Any:
    """Return the first truthy value among ``keys``, else 0."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return 0


def _day_stat(
    raw: dict[str, Any], tz: datetime.tzinfo | None, now: datetime.datetime
) -> DayStat:
    return DayStat(
        date=coerce_datetime(raw.get("date"), tz) or now,
        total_amount_collected=_first(
            raw, "totalAmountCollected", "total_amount_collected"
        ),
        total_no_of_sessions=_first(raw, "totalNoOfSessions", "total_no_of_sessions"),
        expected_amount=_first(raw, "expectedAmount", "expected_amount"),
        day=raw.get("day"),
    )


def normalize_stats(
    doc_id: str,
    data: dict[str, Any],
    tz: datetime.tzinfo | None = None,
    now: datetime.datetime | None = None,
) -> StatsRecord:
    """Normalize one ``organizationStats/{org}/stats`` document.

    Two shapes are stored: documents carrying a ``days_stats`` array, and
    older documents with only document-level totals. The latter become a
    single synthetic day dated at ``start_date``.
    """
    now = now or now_local(tz)
    start_date = coerce_datetime(data.get("start_date"), tz)

    days_stats: tuple[DayStat, ...] = ()
    raw_days = data.get("days_stats")
    if isinstance(raw_days, list):
        days_stats = tuple(
            _day_stat(day, tz, now) for day in raw_days if isinstance(day, dict)
        )
    elif (
        data.get("total_amount_collected") is not None
        or data.get("total_no_of_sessions") is not None
    ):
        days_stats = (
            DayStat(
                date=start_date or now,
                total_amount_collected=data.get("total_amount_collected") or 0,
                total_no_of_sessions=data.get("total_no_of_sessions") or 0,
                expected_amount=_first(
                    data, "expected_amount", "total_amount_collected"
                ),
            ),
        )

    return StatsRecord(
        id=doc_id,
        start_date=start_date or now,
        end_date=coerce_datetime(data.get("end_date"), tz) or now,
        pitch_ref=reference_id(data.get("pitch_ref"), "") or "",
        days_stats=days_stats,
    )


def stats_from_snapshot(
    snapshot: DocumentSnapshot, tz: datetime.tzinfo | None = None
) -> StatsRecord:
    return normalize_stats(snapshot.id, snapshot.to_dict() or {}, tz)


def pitch_from_snapshot(snapshot: DocumentSnapshot, organization_id: str) -> Pitch:
    data = snapshot.to_dict() or {}
    return Pitch(
        id=snapshot.id,
        name=data.get("name") or f"Pitch {snapshot.id}",
        organization_id=organization_id,
        color=data.get("color"),
    )


def organization_from_snapshot(snapshot: DocumentSnapshot) -> Organization | None:
    """Return the organization, or None when the document does not exist."""
    if not snapshot.exists:
        return None
    data = snapshot.to_dict() or {}
    return Organization(id=snapshot.id, name=data.get("name") or "Unknown Organization")
