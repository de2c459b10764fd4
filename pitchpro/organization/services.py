"""Resolve which organizations a dashboard user may manage."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError

from pitchpro.constants import ORGANIZATIONS_COLLECTION, USERS_COLLECTION
from pitchpro.core.references import reference_id

from .models import Organization

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


def _membership_org_id(entry: Any) -> Optional[str]:
    """Extract the organization id from an ``organizations_list`` entry.

    Entries carry either a ``ref`` (reference, path string or ``{path}``) or
    a bare ``id``.
    """
    if not isinstance(entry, dict):
        return reference_id(entry)
    if entry.get("ref"):
        return reference_id(entry["ref"])
    if entry.get("id"):
        return str(entry["id"])
    return None


def get_user_organizations(db: Client, email: str) -> list[Organization]:
    """Fetch the organizations listed on the user document for ``email``.

    An organization document that no longer exists is still listed, with a
    fallback name, so the user can select it. Entries that fail to load are
    logged and skipped.
    """
    if not email:
        return []

    user_docs = list(
        db.collection(USERS_COLLECTION)
        .where(filter=firestore.FieldFilter("email", "==", email))
        .limit(1)
        .stream()
    )
    if not user_docs:
        logger.info(f"No user document found for {email}")
        return []

    user_data = user_docs[0].to_dict() or {}
    organizations = []
    for entry in user_data.get("organizations_list") or []:
        org_id = _membership_org_id(entry)
        if not org_id:
            continue
        try:
            org_doc = db.collection(ORGANIZATIONS_COLLECTION).document(org_id).get()
        except GoogleAPIError as e:
            logger.error(f"Error fetching organization {org_id}: {e}")
            continue

        if org_doc.exists:
            data = org_doc.to_dict() or {}
            name = data.get("name") or "Unknown Organization"
        else:
            fallback = entry.get("name") if isinstance(entry, dict) else None
            name = fallback or f"Organization {org_id}"
        organizations.append(Organization(id=org_id, name=name))

    return organizations


def select_organization(
    organizations: list[Organization], selected_id: Optional[str]
) -> Optional[Organization]:
    """Return the selected organization, defaulting to the first one."""
    for organization in organizations:
        if organization.id == selected_id:
            return organization
    return organizations[0] if organizations else None
