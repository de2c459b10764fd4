"""Firestore queries backing the dashboard."""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError

from pitchpro.constants import (
    ORGANIZATION_STATS_COLLECTION,
    ORGANIZATIONS_COLLECTION,
    PITCHES_COLLECTION,
    STATS_COLLECTION,
)
from pitchpro.errors import DataLoadError
from pitchpro.organization.models import Organization, Pitch

from ..models import StatsRecord
from .normalizer import (
    organization_from_snapshot,
    pitch_from_snapshot,
    stats_from_snapshot,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardState:
    """Everything the dashboard derives its views from, for one organization."""

    organization: Optional[Organization] = None
    pitches: tuple[Pitch, ...] = field(default_factory=tuple)
    stats: tuple[StatsRecord, ...] = field(default_factory=tuple)
    loading: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "organization": self.organization.to_dict() if self.organization else None,
            "pitches": [pitch.to_dict() for pitch in self.pitches],
            "stats": [record.to_dict() for record in self.stats],
            "loading": self.loading,
            "error": self.error,
        }


def organization_ref(db: Client, organization_id: str) -> Any:
    return db.collection(ORGANIZATIONS_COLLECTION).document(organization_id)


def pitches_query(db: Client, organization_id: str) -> Any:
    return organization_ref(db, organization_id).collection(PITCHES_COLLECTION)


def stats_query(db: Client, organization_id: str) -> Any:
    """Stats live under an organization-scoped collection, newest first."""
    return (
        db.collection(ORGANIZATION_STATS_COLLECTION)
        .document(organization_id)
        .collection(STATS_COLLECTION)
        .order_by("start_date", direction=firestore.Query.DESCENDING)
    )


def get_pitches(db: Client, organization_id: str) -> list[Pitch]:
    return [
        pitch_from_snapshot(doc, organization_id)
        for doc in pitches_query(db, organization_id).stream()
    ]


def load_dashboard_data(
    db: Client, organization_id: str, tz: datetime.tzinfo | None = None
) -> DashboardState:
    """Read the organization, its pitches and its stats once.

    Raises:
        DataLoadError: If any of the three reads fails.
    """
    try:
        org_snapshot = organization_ref(db, organization_id).get()
        pitches = tuple(get_pitches(db, organization_id))
        stats = tuple(
            stats_from_snapshot(doc, tz)
            for doc in stats_query(db, organization_id).stream()
        )
    except GoogleAPIError as e:
        logger.error(f"Error loading dashboard data for {organization_id}: {e}")
        raise DataLoadError() from e

    organization = organization_from_snapshot(org_snapshot)
    return DashboardState(
        organization=organization,
        pitches=pitches,
        stats=stats,
        error=None if organization else "Organization not found",
    )
