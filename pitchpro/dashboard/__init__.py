"""The dashboard blueprint: KPIs, analytics charts and the live stats stream."""

from flask import Blueprint

bp = Blueprint("dashboard", __name__)

from . import routes  # noqa: E402, F401
