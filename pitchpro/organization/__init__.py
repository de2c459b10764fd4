"""The organization blueprint."""

from flask import Blueprint

bp = Blueprint("organization", __name__, url_prefix="/organizations")

from . import routes  # noqa: E402

__all__ = ["routes"]
