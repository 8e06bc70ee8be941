from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import ActivityStatus, ConfirmationStatus


@dataclass(frozen=True)
class ConfirmationState:
    """RSVP of one participant for one activity. Never deleted."""

    activity_id: str
    user_id: str
    status: ConfirmationStatus = ConfirmationStatus.PENDING
    notes: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    declined_at: Optional[datetime] = None
    reminder_sent: bool = False
    reminder_sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "activity_id": self.activity_id,
            "user_id": self.user_id,
            "status": self.status.value,
            "notes": self.notes,
            "confirmed_at": isoformat_or_none(self.confirmed_at),
            "declined_at": isoformat_or_none(self.declined_at),
            "reminder_sent": self.reminder_sent,
            "reminder_sent_at": isoformat_or_none(self.reminder_sent_at),
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }


@dataclass(frozen=True)
class ConfirmationRow:
    """Read-model: a confirmation joined with its activity."""

    confirmation: ConfirmationState
    activity_title: str
    activity_start: datetime
    activity_end: datetime
    activity_status: ActivityStatus

    def to_dict(self, *, include_activity: bool = False) -> dict:
        data = self.confirmation.to_dict()
        if include_activity:
            data["activity"] = {
                "id": self.confirmation.activity_id,
                "title": self.activity_title,
                "start_date": self.activity_start.isoformat(),
                "end_date": self.activity_end.isoformat(),
                "status": self.activity_status.value,
            }
        return data


@dataclass(frozen=True)
class ReminderResult:
    total_sent: int
    total_failed: int
    results: list

    def to_dict(self) -> dict:
        return {
            "total_sent": self.total_sent,
            "total_failed": self.total_failed,
            "results": list(self.results),
        }
