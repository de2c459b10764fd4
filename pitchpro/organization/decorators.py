"""Decorators for the organization blueprint."""

from functools import wraps

from firebase_admin import firestore
from flask import session

from pitchpro.errors import NotFoundError

from .services import get_user_organizations, select_organization


def organization_required(f):
    """Inject the selected organization id into the view as ``organization_id``.

    The selection lives in the session. When nothing is selected yet, the
    user's first organization is selected automatically.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        organization_id = session.get("organization_id")
        if not organization_id:
            db = firestore.client()
            organizations = get_user_organizations(db, session.get("email", ""))
            selected = select_organization(organizations, None)
            if selected is None:
                raise NotFoundError("No organization is linked to this account.")
            organization_id = selected.id
            session["organization_id"] = organization_id

        return f(*args, organization_id=organization_id, **kwargs)

    return decorated_function
