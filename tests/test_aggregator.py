"""Tests for the stats aggregator."""

import datetime
import unittest

from pitchpro.constants import PITCH_PALETTE
from pitchpro.core.dates import DateRange, current_year_range
from pitchpro.dashboard.models import DayStat, Metric, StatsRecord
from pitchpro.dashboard.services.aggregator import (
    average_monthly_revenue,
    chart_data,
    chart_rows,
    filtered_totals,
    kpi_data,
    monthly_series,
    pitch_color,
    series_color,
    total_series,
)
from pitchpro.organization.models import Pitch

NOW = datetime.datetime(2025, 3, 20, 9, 0)


def day(y, m, d, collected=0, sessions=0, expected=0):
    return DayStat(
        date=datetime.datetime(y, m, d),
        total_amount_collected=collected,
        total_no_of_sessions=sessions,
        expected_amount=expected,
    )


def record(pitch_ref, *days, record_id=None):
    return StatsRecord(
        id=record_id or f"{pitch_ref}-stats",
        start_date=days[0].date if days else NOW,
        end_date=days[-1].date if days else NOW,
        pitch_ref=pitch_ref,
        days_stats=tuple(days),
    )


PITCHES = [
    Pitch(id="P1", name="Main Field", organization_id="org1"),
    Pitch(id="P2", name="Side Field", organization_id="org1"),
]

RECORDS = [
    record(
        "P1",
        day(2025, 1, 10, 1000, 1, 1200),
        day(2025, 2, 3, 2000, 2, 2000),
        day(2025, 3, 5, 5000, 2, 6000),
    ),
    record("P2", day(2025, 2, 14, 3000, 3, 3500), day(2024, 12, 31, 700, 1, 700)),
]


class FilteredTotalsTestCase(unittest.TestCase):
    def test_single_day_in_monthly_range(self):
        stats = [record("P1", day(2025, 3, 5, 5000, 2, 6000))]
        date_range = DateRange(
            "Monthly", datetime.datetime(2025, 3, 1), datetime.datetime(2025, 3, 31)
        )
        self.assertEqual(
            filtered_totals(date_range, stats),
            {
                "total_amount_collected": 5000,
                "total_no_of_sessions": 2,
                "total_amount_expected": 6000,
            },
        )

    def test_unbounded_range_includes_every_day(self):
        totals = filtered_totals(DateRange(), RECORDS)
        self.assertEqual(totals["total_amount_collected"], 11700)
        self.assertEqual(totals["total_no_of_sessions"], 9)
        self.assertEqual(totals["total_amount_expected"], 13400)

    def test_days_outside_range_are_skipped(self):
        totals = filtered_totals(current_year_range(NOW), RECORDS)
        self.assertEqual(totals["total_amount_collected"], 11000)

    def test_totals_match_sum_of_per_pitch_series(self):
        year = current_year_range(NOW)
        for metric, key in (
            (Metric.REVENUE, "total_amount_collected"),
            (Metric.SESSIONS, "total_no_of_sessions"),
            (Metric.EXPECTED, "total_amount_expected"),
        ):
            with self.subTest(metric=metric):
                datasets = monthly_series(year, RECORDS, PITCHES, metric)
                self.assertEqual(
                    sum(total_series(datasets)), filtered_totals(year, RECORDS)[key]
                )

    def test_record_for_unknown_pitch_counts_in_totals_only(self):
        year = current_year_range(NOW)
        stats = RECORDS + [record("GONE", day(2025, 2, 20, 400, 1, 500))]

        totals = filtered_totals(year, stats)
        self.assertEqual(totals["total_amount_collected"], 11400)
        self.assertEqual(totals["total_no_of_sessions"], 9)

        datasets = monthly_series(year, stats, PITCHES, Metric.REVENUE)
        self.assertEqual([d["name"] for d in datasets], ["Main Field", "Side Field"])
        self.assertEqual(sum(total_series(datasets)), 11000)


class AverageMonthlyRevenueTestCase(unittest.TestCase):
    def test_current_month_only_data_gives_zero(self):
        stats = [record("P1", day(2025, 3, 1, 100), day(2025, 3, 19, 900))]
        self.assertEqual(
            average_monthly_revenue(current_year_range(NOW), stats, NOW), 0
        )

    def test_average_over_months_with_data(self):
        # Jan 1000, Feb 2000 + 3000; March is the current month.
        self.assertEqual(
            average_monthly_revenue(current_year_range(NOW), RECORDS, NOW), 3000
        )

    def test_empty_records(self):
        self.assertEqual(average_monthly_revenue(DateRange(), [], NOW), 0)


class MonthlySeriesTestCase(unittest.TestCase):
    def test_buckets_by_month_per_pitch(self):
        datasets = monthly_series(
            current_year_range(NOW), RECORDS, PITCHES, Metric.REVENUE
        )
        self.assertEqual([d["name"] for d in datasets], ["Main Field", "Side Field"])
        self.assertEqual(datasets[0]["data"][:3], [1000, 2000, 5000])
        self.assertEqual(datasets[1]["data"][:3], [0, 3000, 0])
        self.assertEqual(len(datasets[0]["data"]), 12)

    def test_pitch_without_stats_gets_zeros(self):
        datasets = monthly_series(
            DateRange(),
            RECORDS,
            [Pitch(id="P9", name="Empty", organization_id="org1")],
            Metric.SESSIONS,
        )
        self.assertEqual(datasets[0]["data"], [0.0] * 12)

    def test_chart_rows_pivot(self):
        datasets = [
            {"name": "A", "data": [1, 2], "color": "#000"},
            {"name": "B", "data": [3], "color": "#fff"},
        ]
        self.assertEqual(
            chart_rows(["Jan", "Feb"], datasets),
            [{"month": "Jan", "A": 1, "B": 3}, {"month": "Feb", "A": 2, "B": 0}],
        )


class PitchColorTestCase(unittest.TestCase):
    def test_color_is_a_pure_function_of_id(self):
        self.assertEqual(pitch_color("P1"), pitch_color("P1"))
        self.assertIn(pitch_color("some-long-pitch-id-1234567890"), PITCH_PALETTE)

    def test_known_value(self):
        # hash("P1") = 49 + (80 << 5) - 80 = 2529; 2529 % 8 = 1
        self.assertEqual(pitch_color("P1"), PITCH_PALETTE[1])

    def test_stored_color_wins(self):
        pitch = Pitch(id="P1", name="Main", organization_id="org1", color="#123456")
        self.assertEqual(series_color(pitch), "#123456")


class KpiAndChartTestCase(unittest.TestCase):
    def test_kpis_for_empty_records(self):
        self.assertEqual(
            kpi_data([], NOW),
            {
                "monthly_bookings": 0,
                "collected_revenue": 0,
                "expected_revenue": 0,
                "avg_monthly_revenue": 0,
            },
        )

    def test_kpis_use_month_to_date(self):
        kpis = kpi_data(RECORDS, NOW)
        self.assertEqual(kpis["monthly_bookings"], 2)
        self.assertEqual(kpis["collected_revenue"], 5000)
        self.assertEqual(kpis["expected_revenue"], 6000)
        self.assertEqual(kpis["avg_monthly_revenue"], 3000)

    def test_chart_data_needs_records_and_pitches(self):
        self.assertIsNone(chart_data([], PITCHES, NOW))
        self.assertIsNone(chart_data(RECORDS, [], NOW))

    def test_chart_data_totals(self):
        charts = chart_data(RECORDS, PITCHES, NOW)
        names = [d["name"] for d in charts["datasets"]]
        self.assertEqual(names, ["Total Revenue", "Total Bookings", "Expected Revenue"])
        self.assertEqual(charts["datasets"][0]["data"][:3], [1000, 5000, 5000])
        self.assertEqual(charts["x_values"][0], "Jan")


if __name__ == "__main__":
    unittest.main()
