"""Routes for the auth blueprint."""

from typing import Optional

from firebase_admin import auth
from flask import current_app, jsonify, request, session
from flask_wtf.csrf import generate_csrf

from pitchpro.errors import AccessDeniedError, AuthenticationError, ValidationError

from . import bp
from .forms import LoginForm, ResetPasswordForm
from .services import AuthService, AuthUser


def _store_user(user: Optional[AuthUser]) -> None:
    """Mirror the signed-in user into the Flask session."""
    if user is None:
        session.clear()
        return
    if session.get("user_id") != user.uid:
        session.clear()
    session["user_id"] = user.uid
    session["email"] = user.email
    session["display_name"] = user.display_name


def _auth_service() -> AuthService:
    return AuthService.from_config(
        current_app.config, current_user=AuthUser.from_session(session)
    )


def _form_errors(form) -> str:
    return "; ".join(
        f"{field}: {', '.join(errors)}" for field, errors in form.errors.items()
    )


@bp.route("/login", methods=["GET", "POST"])
def login():
    """Sign in with email and password.

    GET returns a CSRF token for the login form.
    """
    if request.method == "GET":
        return jsonify({"csrf_token": generate_csrf()})

    form = LoginForm()
    if not form.validate_on_submit():
        raise ValidationError(_form_errors(form) or "Invalid login form.")

    auth_service = _auth_service()
    unsubscribe = auth_service.on_auth_state_change(_store_user)
    try:
        user = auth_service.login(form.email.data, form.password.data)
    finally:
        unsubscribe()

    current_app.logger.info(f"User {user.email} logged in")
    return jsonify(
        {"success": True, "message": "Login successful", "user": user.to_dict()}
    )


@bp.route("/session_login", methods=["POST"])
def session_login():
    """Create a server-side session from a client-side Firebase ID token.

    The token's email still has to pass the dashboard access check.
    """
    id_token = (request.get_json(silent=True) or {}).get("idToken")
    if not id_token:
        raise ValidationError("idToken is required.")
    try:
        decoded_token = auth.verify_id_token(id_token)
    except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, ValueError) as e:
        current_app.logger.error(f"Error during session login: {e}")
        raise AuthenticationError("Invalid token or server error.") from e

    email = decoded_token.get("email", "")
    access = _auth_service().check_user_access(email)
    if access.get("status") != "Success":
        raise AccessDeniedError(access.get("message") or "Access denied")

    _store_user(
        AuthUser(
            uid=decoded_token["uid"],
            email=email,
            display_name=decoded_token.get("name", ""),
        )
    )
    return jsonify({"status": "success"})


@bp.route("/logout", methods=["POST"])
def logout():
    auth_service = _auth_service()
    unsubscribe = auth_service.on_auth_state_change(_store_user)
    auth_service.logout()
    unsubscribe()
    return jsonify({"success": True, "message": "Logout successful"})


@bp.route("/reset_password", methods=["POST"])
def reset_password():
    form = ResetPasswordForm()
    if not form.validate_on_submit():
        raise ValidationError(_form_errors(form) or "Invalid email.")

    _auth_service().reset_password(form.email.data)
    return jsonify({"success": True, "message": "Password reset email sent"})
