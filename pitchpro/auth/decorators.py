"""Decorators for the auth blueprint."""

from functools import wraps

from flask import session

from pitchpro.errors import AuthenticationError


def login_required(f):
    """Reject the request with a 401 if the user is not logged in.

    Usage:
    @login_required
    def protected_view():
        ...
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError("Please log in to continue.")
        return f(*args, **kwargs)

    return decorated_function
