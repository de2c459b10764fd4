"""Tests for week navigation."""

import datetime
import unittest

from pitchpro.calendar.services.week import (
    calendar_document_ids,
    is_current_week,
    months_between,
    required_months,
    shift_week,
    start_of_week,
    week_end,
    week_label,
)


class WeekTestCase(unittest.TestCase):
    def test_start_of_week_is_monday_midnight(self):
        # 2025-03-15 is a Saturday.
        self.assertEqual(
            start_of_week(datetime.datetime(2025, 3, 15, 18, 45)),
            datetime.datetime(2025, 3, 10),
        )
        self.assertEqual(
            start_of_week(datetime.date(2025, 3, 10)), datetime.datetime(2025, 3, 10)
        )

    def test_week_end_is_end_of_sunday(self):
        self.assertEqual(
            week_end(datetime.datetime(2025, 3, 10)),
            datetime.datetime(2025, 3, 16, 23, 59, 59, 999999),
        )

    def test_shift_and_label(self):
        week = datetime.datetime(2025, 3, 3)
        self.assertEqual(shift_week(week, -1), datetime.datetime(2025, 2, 24))
        self.assertEqual(week_label(week), "Mar 3 - Mar 9")
        self.assertEqual(week_label(datetime.datetime(2025, 3, 31)), "Mar 31 - Apr 6")

    def test_is_current_week(self):
        now = datetime.datetime(2025, 3, 12, 8)
        self.assertTrue(is_current_week(datetime.datetime(2025, 3, 10), now))
        self.assertFalse(is_current_week(datetime.datetime(2025, 3, 3), now))

    def test_week_spanning_two_months_requires_both_once(self):
        self.assertEqual(
            required_months(datetime.datetime(2025, 3, 31)), [(3, 2025), (4, 2025)]
        )
        self.assertEqual(required_months(datetime.datetime(2025, 3, 10)), [(3, 2025)])

    def test_week_spanning_new_year(self):
        self.assertEqual(
            required_months(datetime.datetime(2024, 12, 30)), [(12, 2024), (1, 2025)]
        )

    def test_months_between(self):
        self.assertEqual(
            months_between(datetime.date(2024, 11, 15), datetime.date(2025, 2, 1)),
            [(11, 2024), (12, 2024), (1, 2025), (2, 2025)],
        )

    def test_calendar_document_ids(self):
        self.assertEqual(
            calendar_document_ids(["P1", "P2"], [(3, 2025), (4, 2025)]),
            ["P1:3:2025", "P1:4:2025", "P2:3:2025", "P2:4:2025"],
        )


if __name__ == "__main__":
    unittest.main()
