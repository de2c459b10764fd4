"""Routes for the organization blueprint."""

from firebase_admin import firestore
from flask import current_app, jsonify, request, session

from pitchpro.auth.decorators import login_required
from pitchpro.errors import NotFoundError, ValidationError

from . import bp
from .services import get_user_organizations, select_organization


@bp.route("/", methods=["GET"])
@login_required
def list_organizations():
    """List the organizations the user manages and the current selection."""
    db = firestore.client()
    organizations = get_user_organizations(db, session.get("email", ""))
    selected = select_organization(organizations, session.get("organization_id"))
    if selected is not None:
        session["organization_id"] = selected.id

    return jsonify(
        {
            "organizations": [org.to_dict() for org in organizations],
            "selected_organization_id": selected.id if selected else None,
        }
    )


@bp.route("/select", methods=["POST"])
@login_required
def select():
    """Switch the organization every other view is scoped to."""
    payload = request.get_json(silent=True) or request.form
    organization_id = payload.get("organization_id")
    if not organization_id:
        raise ValidationError("organization_id is required.")

    db = firestore.client()
    organizations = get_user_organizations(db, session.get("email", ""))
    if not any(org.id == organization_id for org in organizations):
        raise NotFoundError("Organization not found.")

    session["organization_id"] = organization_id
    current_app.logger.info(f"Selected organization {organization_id}")
    return jsonify({"status": "success", "organization_id": organization_id})
