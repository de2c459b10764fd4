"""Data models for the organization blueprint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Organization:
    """A tenant; every dashboard query is scoped to one."""

    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class Pitch:
    """A bookable venue belonging to one organization."""

    id: str
    name: str
    organization_id: str
    color: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "organizationId": self.organization_id,
            "color": self.color,
        }
