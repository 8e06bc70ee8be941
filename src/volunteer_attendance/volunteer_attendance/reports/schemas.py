from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import Field

from ..common.filters import DateRangeFilter, StrictModel
from ..core.constants import DEFAULT_REPORT_LIST_LIMIT, MAX_REPORT_LIST_LIMIT
from ..core.enums import AttendanceStatus, ReportGrouping, ReportType


class ReportFilters(DateRangeFilter):
    """Parameters of the report types; each builder reads only its own keys."""

    date: Optional[dt.date] = None
    week_start: Optional[dt.date] = None
    year: Optional[int] = Field(default=None, ge=1970, le=9999)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    user_id: Optional[str] = None
    status: Optional[AttendanceStatus] = None
    user_type: Optional[str] = Field(default=None, max_length=32)
    group_by: ReportGrouping = ReportGrouping.DAY


class GenerateReportRequest(StrictModel):
    report_type: ReportType = ReportType.ACTIVITY_SUMMARY
    filters: ReportFilters = Field(default_factory=ReportFilters)
    include_user_details: bool = False
    include_activity_details: bool = False


class ReportListFilters(StrictModel):
    report_type: Optional[ReportType] = None
    limit: int = Field(default=DEFAULT_REPORT_LIST_LIMIT, ge=1, le=MAX_REPORT_LIST_LIMIT)
    offset: int = Field(default=0, ge=0)
