"""Assemble the JSON bodies of the dashboard and analytics views."""

from __future__ import annotations

import datetime
from typing import Any, Optional

from pitchpro.core.dates import DateRange
from pitchpro.utils import format_currency

from ..models import Metric
from .aggregator import (
    average_monthly_revenue,
    chart_data,
    chart_rows,
    filtered_totals,
    kpi_data,
    monthly_series,
    total_series,
    x_values,
)
from .data import DashboardState


def dashboard_payload(state: DashboardState, now: datetime.datetime) -> dict[str, Any]:
    """KPI cards and current-year charts for the landing page."""
    kpis = kpi_data(state.stats, now)
    return {
        "organization": state.organization.to_dict() if state.organization else None,
        "pitches": [pitch.to_dict() for pitch in state.pitches],
        "kpis": kpis,
        "kpi_cards": [
            {"title": "Bookings this month", "value": str(kpis["monthly_bookings"])},
            {
                "title": "Collected revenue",
                "value": format_currency(kpis["collected_revenue"]),
            },
            {
                "title": "Expected revenue",
                "value": format_currency(kpis["expected_revenue"]),
            },
            {
                "title": "Average monthly revenue",
                "value": format_currency(kpis["avg_monthly_revenue"]),
            },
        ],
        "charts": chart_data(state.stats, state.pitches, now),
        "loading": state.loading,
        "error": state.error,
    }


def analytics_payload(
    state: DashboardState,
    date_range: DateRange,
    now: datetime.datetime,
    pitch_id: Optional[str] = None,
) -> dict[str, Any]:
    """Per-pitch monthly series plus totals, optionally scoped to one pitch."""
    pitches = [p for p in state.pitches if pitch_id is None or p.id == pitch_id]
    records = [r for r in state.stats if pitch_id is None or r.pitch_ref == pitch_id]
    labels = x_values(date_range)

    series = {}
    for key, metric in (
        ("revenue", Metric.REVENUE),
        ("sessions", Metric.SESSIONS),
        ("expected", Metric.EXPECTED),
    ):
        datasets = monthly_series(date_range, records, pitches, metric)
        series[key] = {
            "datasets": datasets,
            "total": total_series(datasets),
            "rows": chart_rows(labels, datasets),
        }

    return {
        "range": date_range.to_dict(),
        "pitch_id": pitch_id,
        "x_values": labels,
        "totals": filtered_totals(date_range, records),
        "avg_monthly_revenue": average_monthly_revenue(date_range, records, now),
        "series": series,
        "error": state.error,
    }
