from __future__ import annotations

from typing import Optional

from ...core.enums import ReportType
from .base import ReportBuilder, ReportContext, group_rows, in_calendar_order, stats_for


def _user_type(ctx: ReportContext, user_id: str) -> Optional[str]:
    profile = ctx.profiles.get(user_id)
    return profile.user_type if profile else None


class CustomReportBuilder(ReportBuilder):
    report_type = ReportType.CUSTOM

    def build(self, ctx: ReportContext) -> dict:
        filters = ctx.request.filters
        rows = [
            r
            for r in ctx.rows
            if (filters.start_date is None or r.calendar_date >= filters.start_date)
            and (filters.end_date is None or r.calendar_date <= filters.end_date)
            and (filters.status is None or r.status == filters.status)
            and (filters.user_type is None or _user_type(ctx, r.user_id) == filters.user_type)
        ]
        rows = in_calendar_order(rows)
        return {
            "report_type": self.report_type.value,
            "filters": filters.model_dump(mode="json", exclude_none=True),
            "stats": stats_for(rows),
            "grouped_data": group_rows(rows, filters.group_by),
            "records": self.records(ctx, rows),
        }
