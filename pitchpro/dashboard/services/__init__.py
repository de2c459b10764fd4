"""Services for the dashboard blueprint."""

from .data import DashboardState, get_pitches, load_dashboard_data
from .payloads import analytics_payload, dashboard_payload
from .stream import DashboardStream

__all__ = [
    "DashboardState",
    "DashboardStream",
    "analytics_payload",
    "dashboard_payload",
    "get_pitches",
    "load_dashboard_data",
]
