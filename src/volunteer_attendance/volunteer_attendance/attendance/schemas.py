from __future__ import annotations

from typing import Optional

from pydantic import Field

from ..common.filters import DateRangeFilter, PageFilter, StrictModel
from ..core.enums import ActivityStatus, AttendanceStatus


class CheckInData(StrictModel):
    location: Optional[str] = Field(default=None, max_length=255)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    device_info: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=1000)


class CheckOutData(StrictModel):
    notes: Optional[str] = Field(default=None, max_length=1000)


class AbsenceData(StrictModel):
    notes: Optional[str] = Field(default=None, max_length=1000)
    is_excused: bool = False


class ActivityRecordFilters(PageFilter):
    status: Optional[AttendanceStatus] = None
    include_user_details: bool = False


class UserRecordFilters(DateRangeFilter, PageFilter):
    status: Optional[AttendanceStatus] = None
    activity_status: Optional[ActivityStatus] = None
    include_activity_details: bool = False
