"""Tests for laying sessions out on the calendar."""

import datetime
import unittest

from pitchpro.calendar.models import SessionRecord, TimeOfDay
from pitchpro.calendar.services.events import (
    filter_sessions_by_pitch,
    is_valid_session,
    process_sessions_for_calendar,
    selected_pitch_name,
    session_type_label,
    transform_session_to_event,
)
from pitchpro.organization.models import Pitch


def make_session(**overrides):
    values = {
        "id": "sess1",
        "session_date": datetime.datetime(2025, 3, 12),
        "start_time": TimeOfDay(18, 0),
        "end_time": TimeOfDay(19, 30),
        "owner_name": "Jane Wanjiru",
        "pitch_name": "Main Field",
        "organization_ref": "org1",
        "session_type": "PermanentSession",
        "status": "Confirmed",
        "collected_amount": 2500,
    }
    values.update(overrides)
    return SessionRecord(**values)


class EventTransformTestCase(unittest.TestCase):
    def test_confirmed_session_event(self):
        event = transform_session_to_event(make_session())
        self.assertEqual(event["start"], "2025-03-12T18:00:00")
        self.assertEqual(event["end"], "2025-03-12T19:30:00")
        self.assertEqual(
            event["title"],
            "Jane Wanjiru\nSession - Ksh 2500\n6:00 PM - 7:30 PM\nStatus: Confirmed",
        )
        self.assertEqual(event["backgroundColor"], "#2C6E49")
        self.assertEqual(event["textColor"], "#FFFFFF")
        self.assertEqual(event["extendedProps"]["sessionId"], "sess1")

    def test_completed_session_is_grey(self):
        event = transform_session_to_event(make_session(status="Completed"))
        self.assertEqual(event["backgroundColor"], "#D1D5DB")
        self.assertEqual(event["borderColor"], "#9CA3AF")
        self.assertEqual(event["textColor"], "#000000")

    def test_overnight_session_ends_next_day(self):
        event = transform_session_to_event(
            make_session(start_time=TimeOfDay(22, 0), end_time=TimeOfDay(1, 0))
        )
        self.assertEqual(event["start"], "2025-03-12T22:00:00")
        self.assertEqual(event["end"], "2025-03-13T01:00:00")

    def test_type_labels(self):
        self.assertEqual(
            session_type_label(make_session(collected_amount=None)), "Session - Ksh 0"
        )
        self.assertEqual(
            session_type_label(make_session(session_type="PermanentWeekly")), "Weekly"
        )
        self.assertEqual(session_type_label(make_session(session_type="X")), "Monthly")

    def test_only_confirmed_and_completed_are_shown(self):
        sessions = [
            make_session(id="a"),
            make_session(id="b", status="Completed"),
            make_session(id="c", status="Cancelled"),
            make_session(id="d", status="Pending"),
        ]
        self.assertFalse(is_valid_session(sessions[2]))
        events = process_sessions_for_calendar(sessions)
        self.assertEqual([e["id"] for e in events], ["a", "b"])

    def test_bad_session_is_skipped(self):
        sessions = [make_session(id="bad", start_time=TimeOfDay(25, 0)), make_session()]
        events = process_sessions_for_calendar(sessions)
        self.assertEqual([e["id"] for e in events], ["sess1"])


class SessionFilterTestCase(unittest.TestCase):
    def test_pitch_selection(self):
        one = [Pitch(id="P1", name="Main Field", organization_id="org1")]
        two = one + [Pitch(id="P2", name="Side Field", organization_id="org1")]
        self.assertIsNone(selected_pitch_name(one, "Main Field"))
        self.assertEqual(selected_pitch_name(two, None), "Main Field")
        self.assertEqual(selected_pitch_name(two, "Side Field"), "Side Field")
        self.assertEqual(selected_pitch_name(two, "Unknown"), "Main Field")

    def test_filter_by_pitch(self):
        sessions = [make_session(id="a"), make_session(id="b", pitch_name="Side Field")]
        self.assertEqual(len(filter_sessions_by_pitch(sessions, None)), 2)
        self.assertEqual(
            [s.id for s in filter_sessions_by_pitch(sessions, "Side Field")], ["b"]
        )


if __name__ == "__main__":
    unittest.main()
