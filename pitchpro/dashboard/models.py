"""Data models for the dashboard blueprint."""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass, field
from typing import Any, Optional, TypedDict


class Metric(enum.Enum):
    """The DayStat field a chart series sums."""

    REVENUE = "totalAmountCollected"
    SESSIONS = "totalNoOfSessions"
    EXPECTED = "expectedAmount"


@dataclass(frozen=True)
class DayStat:
    """One calendar day of booking activity for one pitch."""

    date: datetime.datetime
    total_amount_collected: float = 0
    total_no_of_sessions: int = 0
    expected_amount: float = 0
    day: Optional[str] = None

    def value(self, metric: Metric) -> float:
        if metric is Metric.REVENUE:
            return self.total_amount_collected or 0
        if metric is Metric.SESSIONS:
            return self.total_no_of_sessions or 0
        return self.expected_amount or 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "totalAmountCollected": self.total_amount_collected,
            "totalNoOfSessions": self.total_no_of_sessions,
            "expectedAmount": self.expected_amount,
            "day": self.day,
        }


@dataclass(frozen=True)
class StatsRecord:
    """A batch of daily stats for one pitch over a period."""

    id: str
    start_date: datetime.datetime
    end_date: datetime.datetime
    pitch_ref: str
    days_stats: tuple[DayStat, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "pitch_ref": self.pitch_ref,
            "days_stats": [day.to_dict() for day in self.days_stats],
        }


class StatsTotals(TypedDict):
    """Scalar totals over a date range."""

    total_amount_collected: float
    total_no_of_sessions: float
    total_amount_expected: float


class ChartSeries(TypedDict):
    """One line of a month-bucketed chart."""

    name: str
    data: list[float]
    color: str


class KPIData(TypedDict):
    """Summary numbers shown on the dashboard cards."""

    monthly_bookings: float
    collected_revenue: float
    expected_revenue: float
    avg_monthly_revenue: float


class ChartData(TypedDict):
    x_values: list[str]
    datasets: list[ChartSeries]
