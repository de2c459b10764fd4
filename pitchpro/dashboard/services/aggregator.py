"""Client-side aggregation of per-pitch daily stats into KPIs and chart series."""

from __future__ import annotations

import datetime
from collections.abc import Iterable, Sequence
from typing import Any

from pitchpro.constants import EXPECTED_REVENUE_COLOR, PITCH_PALETTE, PRIMARY_COLOR
from pitchpro.core.dates import (
    MONTH_NAMES,
    DateRange,
    current_month_range,
    current_year_range,
)
from pitchpro.organization.models import Pitch

from ..models import (
    ChartData,
    ChartSeries,
    KPIData,
    Metric,
    StatsRecord,
    StatsTotals,
)

MONTHS_IN_YEAR = 12


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def pitch_color(pitch_id: str) -> str:
    """Map a pitch id to a palette color.

    Uses the ``hash = code + ((hash << 5) - hash)`` string hash over UTF-16
    code units, with the shift done in 32-bit signed arithmetic, so the same
    id gets the same color as in the mobile and web clients.
    """
    hash_value = 0
    encoded = pitch_id.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        code = encoded[i] | (encoded[i + 1] << 8)
        shifted = _to_int32(_to_int32(hash_value) << 5)
        hash_value = code + (shifted - hash_value)
    return PITCH_PALETTE[abs(hash_value) % len(PITCH_PALETTE)]


def series_color(pitch: Pitch) -> str:
    return pitch.color or pitch_color(pitch.id)


def filtered_totals(
    date_range: DateRange, records: Iterable[StatsRecord]
) -> StatsTotals:
    """Sum collected, session and expected amounts of every day in range."""
    totals: StatsTotals = {
        "total_amount_collected": 0,
        "total_no_of_sessions": 0,
        "total_amount_expected": 0,
    }
    for record in records:
        for day in record.days_stats:
            if not date_range.contains(day.date):
                continue
            totals["total_amount_collected"] += day.value(Metric.REVENUE)
            totals["total_no_of_sessions"] += day.value(Metric.SESSIONS)
            totals["total_amount_expected"] += day.value(Metric.EXPECTED)
    return totals


def average_monthly_revenue(
    date_range: DateRange,
    records: Iterable[StatsRecord],
    now: datetime.datetime | None = None,
) -> float:
    """Average revenue per month with data, leaving out the current month.

    The current month is skipped because its data is still partial.
    """
    now = now or datetime.datetime.now()
    current_month = (now.year, now.month)

    total_revenue = 0.0
    months: set[tuple[int, int]] = set()
    for record in records:
        for day in record.days_stats:
            month_key = (day.date.year, day.date.month)
            if month_key == current_month:
                continue
            if date_range.contains(day.date):
                total_revenue += day.value(Metric.REVENUE)
                months.add(month_key)

    return total_revenue / len(months) if months else 0


def monthly_series(
    date_range: DateRange,
    records: Sequence[StatsRecord],
    pitches: Iterable[Pitch],
    metric: Metric,
) -> list[ChartSeries]:
    """Bucket each pitch's days in range into a 12-slot month array."""
    datasets: list[ChartSeries] = []
    for pitch in pitches:
        monthly = [0.0] * MONTHS_IN_YEAR
        for record in records:
            if record.pitch_ref != pitch.id:
                continue
            for day in record.days_stats:
                if date_range.contains(day.date):
                    monthly[day.date.month - 1] += day.value(metric)

        datasets.append(
            {"name": pitch.name, "data": monthly, "color": series_color(pitch)}
        )
    return datasets


def total_series(datasets: Iterable[ChartSeries]) -> list[float]:
    """Index-wise sum of monthly series across all pitches."""
    totals = [0.0] * MONTHS_IN_YEAR
    for dataset in datasets:
        for index, value in enumerate(dataset["data"][:MONTHS_IN_YEAR]):
            totals[index] += value
    return totals


def x_values(date_range: DateRange) -> list[str]:
    """Chart x-axis labels.

    Every range type is bucketed by month at the moment.
    """
    return list(MONTH_NAMES)


def chart_rows(
    labels: Sequence[str], datasets: Iterable[ChartSeries]
) -> list[dict[str, Any]]:
    """Pivot series into one row per label keyed by series name."""
    datasets = list(datasets)
    rows = []
    for index, label in enumerate(labels):
        row: dict[str, Any] = {"month": label}
        for dataset in datasets:
            data = dataset["data"]
            row[dataset["name"]] = data[index] if index < len(data) else 0
        rows.append(row)
    return rows


def kpi_data(
    records: Sequence[StatsRecord], now: datetime.datetime | None = None
) -> KPIData:
    """Month-to-date totals plus the current year's average monthly revenue."""
    now = now or datetime.datetime.now()
    if not records:
        return {
            "monthly_bookings": 0,
            "collected_revenue": 0,
            "expected_revenue": 0,
            "avg_monthly_revenue": 0,
        }

    monthly = filtered_totals(current_month_range(now), records)
    return {
        "monthly_bookings": monthly["total_no_of_sessions"],
        "collected_revenue": monthly["total_amount_collected"],
        "expected_revenue": monthly["total_amount_expected"],
        "avg_monthly_revenue": average_monthly_revenue(
            current_year_range(now), records, now
        ),
    }


def chart_data(
    records: Sequence[StatsRecord],
    pitches: Sequence[Pitch],
    now: datetime.datetime | None = None,
) -> ChartData | None:
    """Current-year totals across all pitches for the dashboard charts."""
    if not records or not pitches:
        return None

    year_range = current_year_range(now or datetime.datetime.now())
    revenue = total_series(monthly_series(year_range, records, pitches, Metric.REVENUE))
    bookings = total_series(
        monthly_series(year_range, records, pitches, Metric.SESSIONS)
    )
    expected = total_series(
        monthly_series(year_range, records, pitches, Metric.EXPECTED)
    )

    return {
        "x_values": x_values(year_range),
        "datasets": [
            {"name": "Total Revenue", "data": revenue, "color": PRIMARY_COLOR},
            {"name": "Total Bookings", "data": bookings, "color": PRIMARY_COLOR},
            {
                "name": "Expected Revenue",
                "data": expected,
                "color": EXPECTED_REVENUE_COLOR,
            },
        ],
    }
