from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ActivityStatus


@dataclass(frozen=True)
class Activity:
    """Read-only view of an activity owned by the activity directory."""

    activity_id: str
    title: str
    start_at: datetime
    end_at: datetime
    status: ActivityStatus
    created_by: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    is_online: bool = False
    meeting_url: Optional[str] = None

    def to_dict(self, *, detailed: bool = True) -> dict:
        if not detailed:
            return {"id": self.activity_id, "title": self.title}
        return {
            "id": self.activity_id,
            "title": self.title,
            "description": self.description,
            "start_date": self.start_at.isoformat(),
            "end_date": self.end_at.isoformat(),
            "status": self.status.value,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "is_online": self.is_online,
            "meeting_url": self.meeting_url,
        }
