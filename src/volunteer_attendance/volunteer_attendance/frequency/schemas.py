from __future__ import annotations

from typing import Optional

from pydantic import Field

from ..common.filters import DateRangeFilter, StrictModel
from ..core.constants import DEFAULT_ALERT_DAYS, DEFAULT_MIN_ATTENDANCE_RATE, DEFAULT_RANKING_LIMIT
from ..core.enums import ActivityStatus, PeriodGrouping


class FrequencyFilters(DateRangeFilter):
    activity_status: Optional[ActivityStatus] = ActivityStatus.COMPLETED
    include_records: bool = False


class ActivityFrequencyFilters(StrictModel):
    include_records: bool = False
    include_user_details: bool = False


class PeriodFilters(DateRangeFilter):
    user_id: Optional[str] = None
    group_by: PeriodGrouping = PeriodGrouping.DAY
    activity_status: Optional[ActivityStatus] = ActivityStatus.COMPLETED


class RankingFilters(DateRangeFilter):
    activity_status: Optional[ActivityStatus] = ActivityStatus.COMPLETED
    limit: int = Field(default=DEFAULT_RANKING_LIMIT, ge=1, le=100)
    include_user_details: bool = False


class AlertFilters(StrictModel):
    days: int = Field(default=DEFAULT_ALERT_DAYS, ge=1, le=366)
    min_attendance_rate: int = Field(default=DEFAULT_MIN_ATTENDANCE_RATE, ge=0, le=100)
