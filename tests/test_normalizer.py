"""Tests for turning stats documents into models."""

import datetime
import unittest

from pitchpro.core.dates import get_timezone
from pitchpro.dashboard.services.normalizer import (
    normalize_stats,
    organization_from_snapshot,
    pitch_from_snapshot,
    stats_from_snapshot,
)
from tests.conftest import FakeSnapshot

NAIROBI = get_timezone("Africa/Nairobi")
NOW = datetime.datetime(2025, 3, 20, 9, 0)


class NormalizeStatsTestCase(unittest.TestCase):
    def test_days_stats_shape(self):
        data = {
            "start_date": datetime.datetime(2025, 3, 1),
            "end_date": datetime.datetime(2025, 3, 31),
            "pitch_ref": "organizations/org1/pitches/P1",
            "days_stats": [
                {
                    "date": datetime.datetime(
                        2025, 3, 4, 21, 0, tzinfo=datetime.timezone.utc
                    ),
                    "totalAmountCollected": 5000,
                    "totalNoOfSessions": 2,
                    "expectedAmount": 6000,
                    "day": "Wed",
                },
                {
                    "date": "2025-03-06",
                    "total_amount_collected": 100,
                    "total_no_of_sessions": 1,
                },
                "garbage",
            ],
        }
        record = normalize_stats("s1", data, NAIROBI, NOW)

        self.assertEqual(record.pitch_ref, "P1")
        self.assertEqual(len(record.days_stats), 2)
        first, second = record.days_stats
        # 21:00 UTC on the 4th is midnight of the 5th in Nairobi.
        self.assertEqual(first.date, datetime.datetime(2025, 3, 5))
        self.assertEqual(first.total_amount_collected, 5000)
        self.assertEqual(first.expected_amount, 6000)
        self.assertEqual(second.total_amount_collected, 100)
        self.assertEqual(second.expected_amount, 0)

    def test_flat_shape_becomes_single_day(self):
        data = {
            "start_date": datetime.datetime(2025, 2, 1),
            "end_date": datetime.datetime(2025, 2, 28),
            "pitch_ref": {"path": "pitches/P2"},
            "total_amount_collected": 800,
            "total_no_of_sessions": 4,
        }
        record = normalize_stats("s2", data, NAIROBI, NOW)

        self.assertEqual(record.pitch_ref, "P2")
        (only_day,) = record.days_stats
        self.assertEqual(only_day.date, datetime.datetime(2025, 2, 1))
        self.assertEqual(only_day.total_no_of_sessions, 4)
        # Expected falls back to collected.
        self.assertEqual(only_day.expected_amount, 800)

    def test_missing_fields(self):
        record = normalize_stats("s3", {}, NAIROBI, NOW)
        self.assertEqual(record.days_stats, ())
        self.assertEqual(record.pitch_ref, "")
        self.assertEqual(record.start_date, NOW)

    def test_missing_day_date_uses_now(self):
        record = normalize_stats(
            "s4", {"days_stats": [{"totalAmountCollected": 1}]}, NAIROBI, NOW
        )
        self.assertEqual(record.days_stats[0].date, NOW)

    def test_from_snapshot(self):
        snapshot = FakeSnapshot("s5", {"pitch_ref": "P1", "days_stats": []})
        self.assertEqual(stats_from_snapshot(snapshot, NAIROBI).id, "s5")


class SnapshotModelsTestCase(unittest.TestCase):
    def test_pitch_name_fallback(self):
        pitch = pitch_from_snapshot(FakeSnapshot("P1", {}), "org1")
        self.assertEqual(pitch.name, "Pitch P1")
        self.assertEqual(pitch.organization_id, "org1")

    def test_missing_organization(self):
        self.assertIsNone(organization_from_snapshot(FakeSnapshot("org1", None)))

    def test_organization_name_fallback(self):
        organization = organization_from_snapshot(FakeSnapshot("org1", {}))
        self.assertEqual(organization.name, "Unknown Organization")


if __name__ == "__main__":
    unittest.main()
