from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Sequence

from ...activities.model import Activity
from ...attendance.model import AttendanceRow
from ...common.datetime_utils import period_key
from ...core.enums import PeriodGrouping, ReportGrouping, ReportType
from ...frequency.stats import compute_stats
from ...users.model import UserProfile
from ..schemas import GenerateReportRequest

# Key name used for each grouping in breakdown entries.
_GROUP_LABELS = {
    ReportGrouping.DAY: "date",
    ReportGrouping.WEEK: "week_start",
    ReportGrouping.MONTH: "month",
    ReportGrouping.USER: "user_id",
}


@dataclass(frozen=True)
class ReportContext:
    activity: Activity
    rows: Sequence[AttendanceRow]
    request: GenerateReportRequest
    today: date
    participants: Sequence[str] = ()
    profiles: Dict[str, UserProfile] = field(default_factory=dict)


def placed_at(row: AttendanceRow) -> datetime:
    """Where a record sits on the calendar: check-in, else the scheduled start."""
    return row.record.check_in_time or row.activity_start


def in_calendar_order(rows: Iterable[AttendanceRow]) -> List[AttendanceRow]:
    return sorted(rows, key=lambda r: (placed_at(r), r.user_id))


def stats_for(rows: Iterable[AttendanceRow]) -> dict:
    return compute_stats(r.status for r in rows).to_dict()


def group_rows(rows: Sequence[AttendanceRow], grouping: ReportGrouping) -> List[dict]:
    grouped: Dict[str, List[AttendanceRow]] = defaultdict(list)
    for row in rows:
        if grouping == ReportGrouping.USER:
            key = row.user_id
        else:
            key = period_key(row.calendar_date, PeriodGrouping(grouping.value))
        grouped[key].append(row)

    label = _GROUP_LABELS[grouping]
    return [
        {label: key, "total": len(grouped[key]), "stats": stats_for(grouped[key])}
        for key in sorted(grouped)
    ]


class ReportBuilder(ABC):
    """Strategy Pattern: one builder per report type, all pure over the context."""

    report_type: ReportType

    @abstractmethod
    def build(self, ctx: ReportContext) -> dict:
        raise NotImplementedError

    def records(self, ctx: ReportContext, rows: Sequence[AttendanceRow]) -> List[dict]:
        data = [r.to_dict() for r in rows]
        if ctx.request.include_user_details:
            for item, row in zip(data, rows):
                profile = ctx.profiles.get(row.user_id)
                item["user"] = profile.to_dict() if profile else None
        return data
