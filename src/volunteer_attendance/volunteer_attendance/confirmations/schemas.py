from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from ..common.filters import DateRangeFilter, PageFilter, StrictModel
from ..core.enums import ActivityStatus, ConfirmationStatus


class ConfirmationData(StrictModel):
    notes: Optional[str] = Field(default=None, max_length=1000)


class ReminderRequest(StrictModel):
    user_ids: Optional[List[str]] = Field(default=None, max_length=1000)


class ActivityConfirmationFilters(PageFilter):
    status: Optional[ConfirmationStatus] = None
    include_user_details: bool = False


class UserConfirmationFilters(DateRangeFilter, PageFilter):
    status: Optional[ConfirmationStatus] = None
    activity_status: Optional[ActivityStatus] = None
    include_activity_details: bool = False
