from __future__ import annotations

from collections import defaultdict
from typing import Dict, List

from ...attendance.model import AttendanceRow
from ...core.enums import ReportType
from ...core.exceptions import ValidationError
from .base import ReportBuilder, ReportContext, in_calendar_order, stats_for


def _average_hour(hours: List[int]) -> int:
    if not hours:
        return 0
    return (2 * sum(hours) + len(hours)) // (2 * len(hours))


class ActivitySummaryReportBuilder(ReportBuilder):
    report_type = ReportType.ACTIVITY_SUMMARY

    def build(self, ctx: ReportContext) -> dict:
        rows = in_calendar_order(ctx.rows)
        per_user: Dict[str, List[AttendanceRow]] = defaultdict(list)
        for row in rows:
            per_user[row.user_id].append(row)

        return {
            "report_type": self.report_type.value,
            "activity": ctx.activity.to_dict(detailed=ctx.request.include_activity_details),
            "total_participants": len(ctx.participants),
            "stats": stats_for(rows),
            "participant_stats": [
                {"user_id": uid, **stats_for(per_user[uid])} for uid in sorted(per_user)
            ],
            "records": self.records(ctx, rows),
        }


class ParticipantSummaryReportBuilder(ReportBuilder):
    report_type = ReportType.PARTICIPANT_SUMMARY

    def build(self, ctx: ReportContext) -> dict:
        user_id = ctx.request.filters.user_id
        if not user_id:
            raise ValidationError(
                "filters.user_id is required for a participant summary",
                errors=[{"field": "filters.user_id", "message": "Field required"}],
            )

        rows = in_calendar_order(r for r in ctx.rows if r.user_id == user_id)
        check_ins = [r.record.check_in_time.hour for r in rows if r.record.check_in_time]
        check_outs = [r.record.check_out_time.hour for r in rows if r.record.check_out_time]
        return {
            "report_type": self.report_type.value,
            "user_id": user_id,
            "stats": stats_for(rows),
            "time_analysis": {
                "average_check_in": _average_hour(check_ins),
                "average_check_out": _average_hour(check_outs),
                "total_check_ins": len(check_ins),
                "total_check_outs": len(check_outs),
            },
            "records": self.records(ctx, rows),
        }
