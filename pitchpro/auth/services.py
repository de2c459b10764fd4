"""Dashboard sign-in against Firebase Authentication.

Sign-in is two steps: the ``checkDashboardAccess`` callable function decides
whether the email may use the dashboard at all, then the password is checked
by the Firebase Auth REST API. A rejection by the first step is an
``AccessDeniedError`` carrying the function's own message; a rejection by the
second is an ``AuthenticationError`` with a readable reason.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

import requests

from pitchpro.errors import AccessDeniedError, AuthenticationError

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"
DEFAULT_TIMEOUT = 10

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection"
SERVER_ERROR_MESSAGE = "Server error. Please try again later."
LOGIN_FAILED_MESSAGE = "Login failed. Please try again."

AUTH_ERROR_MESSAGES = {
    "EMAIL_NOT_FOUND": "User not found",
    "USER_DISABLED": "User not found",
    "INVALID_PASSWORD": "Invalid password",
    "INVALID_EMAIL": "Invalid email format",
    "MISSING_EMAIL": "Invalid email format",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many failed attempts. Please try again later",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password",
}


@dataclass(frozen=True)
class AuthUser:
    uid: str
    email: str
    display_name: str = ""
    id_token: str = ""
    refresh_token: str = ""

    @classmethod
    def from_session(cls, session: Mapping[str, Any]) -> Optional[AuthUser]:
        if not session.get("user_id"):
            return None
        return cls(
            uid=session["user_id"],
            email=session.get("email", ""),
            display_name=session.get("display_name", ""),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "uid": self.uid,
            "email": self.email,
            "display_name": self.display_name,
        }


AuthStateListener = Callable[[Optional[AuthUser]], None]


def auth_error_message(code: str) -> str:
    """Map a Firebase Auth error code to the message shown to the user.

    Codes may carry a detail suffix, e.g. ``TOO_MANY_ATTEMPTS_TRY_LATER : ...``.
    """
    code = (code or "").split(" : ")[0].strip()
    return AUTH_ERROR_MESSAGES.get(code, LOGIN_FAILED_MESSAGE)


class AuthService:
    """Signs one user in and out and tells listeners about it."""

    def __init__(
        self,
        api_key: str,
        access_check_url: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        current_user: Optional[AuthUser] = None,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.access_check_url = access_check_url
        self.timeout = timeout
        self.http = http or requests.Session()
        self._current_user = current_user
        self._listeners: list[AuthStateListener] = []

    @classmethod
    def from_config(
        cls, config: Mapping[str, Any], current_user: Optional[AuthUser] = None
    ) -> AuthService:
        return cls(
            config.get("FIREBASE_WEB_API_KEY") or "",
            config.get("ACCESS_CHECK_URL") or "",
            timeout=config.get("HTTP_TIMEOUT") or DEFAULT_TIMEOUT,
            current_user=current_user,
        )

    def get_current_user(self) -> Optional[AuthUser]:
        return self._current_user

    def on_auth_state_change(self, callback: AuthStateListener) -> Callable[[], None]:
        """Call ``callback`` now and after every sign-in or sign-out.

        Returns a function that removes the callback.
        """
        self._listeners.append(callback)
        callback(self._current_user)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def check_user_access(self, email: str) -> dict[str, Any]:
        """Ask the access-check function whether ``email`` may use the dashboard.

        Returns the function's result, ``{"status": ..., "message": ...}``.
        """
        if not self.access_check_url:
            raise AuthenticationError(SERVER_ERROR_MESSAGE)
        try:
            response = self.http.post(
                self.access_check_url,
                json={"data": {"email": email}},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Access check error: {e}")
            raise AuthenticationError(NETWORK_ERROR_MESSAGE) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code >= 500 or "error" in body:  # noqa: PLR2004
            logger.error(f"Access check failed ({response.status_code}): {body}")
            raise AuthenticationError(SERVER_ERROR_MESSAGE)
        return body.get("result") or {}

    def login(self, email: str, password: str) -> AuthUser:
        """Check dashboard access, then sign in with email and password."""
        logger.info(f"Starting login for {email}")
        access = self.check_user_access(email)
        if access.get("status") != "Success":
            message = access.get("message") or "Access denied"
            logger.info(f"Access denied for {email}: {message}")
            raise AccessDeniedError(message)

        body = self._identity_toolkit(
            "accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        user = AuthUser(
            uid=body["localId"],
            email=body.get("email") or email,
            display_name=body.get("displayName") or "",
            id_token=body.get("idToken") or "",
            refresh_token=body.get("refreshToken") or "",
        )
        self._set_current_user(user)
        return user

    def logout(self) -> None:
        self._set_current_user(None)

    def reset_password(self, email: str) -> None:
        """Have Firebase send a password reset email."""
        self._identity_toolkit(
            "accounts:sendOobCode", {"requestType": "PASSWORD_RESET", "email": email}
        )
        logger.info(f"Password reset email sent to {email}")

    def _identity_toolkit(self, method: str, payload: dict[str, Any]) -> dict:
        try:
            response = self.http.post(
                f"{IDENTITY_TOOLKIT_URL}/{method}",
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Firebase Auth request failed: {e}")
            raise AuthenticationError(NETWORK_ERROR_MESSAGE) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.ok:
            return body
        if response.status_code >= 500:  # noqa: PLR2004
            raise AuthenticationError(SERVER_ERROR_MESSAGE)

        code = (body.get("error") or {}).get("message", "")
        logger.warning(f"Firebase Auth rejected {method}: {code}")
        raise AuthenticationError(auth_error_message(code))

    def _set_current_user(self, user: Optional[AuthUser]) -> None:
        self._current_user = user
        for listener in list(self._listeners):
            listener(user)
