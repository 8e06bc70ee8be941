from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.constants import PRESENT_STATUSES
from ..core.enums import ActivityStatus, AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one participant's attendance at one activity.

    Note: ``record_id`` is None until the record has been stored.
    """

    activity_id: str
    user_id: str
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    device_info: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    record_id: Optional[int] = None

    @property
    def is_present(self) -> bool:
        return self.status in PRESENT_STATUSES

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "activity_id": self.activity_id,
            "user_id": self.user_id,
            "status": self.status.value,
            "check_in_time": isoformat_or_none(self.check_in_time),
            "check_out_time": isoformat_or_none(self.check_out_time),
            "location": self.location,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "device_info": self.device_info,
            "notes": self.notes,
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model for aggregation: a record joined with its activity schedule."""

    record: AttendanceRecord
    activity_title: str
    activity_start: datetime
    activity_end: datetime
    activity_status: ActivityStatus

    @property
    def user_id(self) -> str:
        return self.record.user_id

    @property
    def activity_id(self) -> str:
        return self.record.activity_id

    @property
    def status(self) -> AttendanceStatus:
        return self.record.status

    @property
    def calendar_date(self) -> date:
        """Day the record belongs to: check-in day, else the scheduled start day."""
        return (self.record.check_in_time or self.activity_start).date()

    def to_dict(self, *, include_activity: bool = False) -> dict:
        data = self.record.to_dict()
        if include_activity:
            data["activity"] = {
                "id": self.activity_id,
                "title": self.activity_title,
                "start_date": self.activity_start.isoformat(),
                "end_date": self.activity_end.isoformat(),
                "status": self.activity_status.value,
            }
        return data
