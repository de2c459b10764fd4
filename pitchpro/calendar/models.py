"""Data models for the calendar blueprint."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Optional, TypedDict

from pitchpro.utils import format_clock


@dataclass(frozen=True)
class TimeOfDay:
    hour: int = 0
    minute: int = 0

    def label(self) -> str:
        return format_clock(self.hour, self.minute)

    def to_dict(self) -> dict[str, int]:
        return {"hour": self.hour, "minute": self.minute}


@dataclass(frozen=True)
class SessionRecord:
    """One booking occurrence as shown on the calendar.

    ``end_time`` may be earlier than ``start_time`` for sessions that run
    past midnight; only the calendar adapter moves such an end to the next
    day.
    """

    id: str
    session_date: datetime.datetime
    start_time: TimeOfDay
    end_time: TimeOfDay
    owner_name: str
    pitch_name: str
    organization_ref: str
    session_type: str = "Session"
    status: str = "Confirmed"
    collected_amount: Optional[float] = None
    owner_ref: str = ""
    reference_id: str = ""

    @property
    def time_label(self) -> str:
        return f"{self.start_time.label()} - {self.end_time.label()}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "sessionDate": self.session_date.isoformat(),
            "sessionTime": {
                "startTime": self.start_time.to_dict(),
                "endTime": self.end_time.to_dict(),
            },
            "sessionOwner": {"name": self.owner_name, "userRef": self.owner_ref},
            "pitch": {
                "pitchName": self.pitch_name,
                "organization_ref": self.organization_ref,
            },
            "sessionType": self.session_type,
            "status": self.status,
            "collectedAmount": self.collected_amount,
            "reference": {"id": self.reference_id or self.id},
            "time": self.time_label,
        }


class ExtendedProps(TypedDict):
    sessionId: str
    ownerName: str
    sessionType: str
    status: str
    timeLabel: str
    amount: Optional[float]


class CalendarEvent(TypedDict):
    """A session laid out on the visual week grid."""

    id: str
    start: str
    end: str
    title: str
    backgroundColor: str
    borderColor: str
    textColor: str
    extendedProps: ExtendedProps
