from __future__ import annotations

import calendar
from datetime import date, timedelta

from ...common.datetime_utils import week_start
from ...core.enums import ReportGrouping, ReportType
from .base import ReportBuilder, ReportContext, group_rows, in_calendar_order, stats_for


class DailyReportBuilder(ReportBuilder):
    report_type = ReportType.DAILY

    def build(self, ctx: ReportContext) -> dict:
        target = ctx.request.filters.date or ctx.today
        rows = in_calendar_order(r for r in ctx.rows if r.calendar_date == target)
        return {
            "report_type": self.report_type.value,
            "date": target.isoformat(),
            "stats": stats_for(rows),
            "records": self.records(ctx, rows),
        }


class WeeklyReportBuilder(ReportBuilder):
    """Sunday-aligned week; ``week_start`` is taken as given."""

    report_type = ReportType.WEEKLY

    def build(self, ctx: ReportContext) -> dict:
        start = ctx.request.filters.week_start or week_start(ctx.today)
        end = start + timedelta(days=6)
        rows = in_calendar_order(r for r in ctx.rows if start <= r.calendar_date <= end)
        return {
            "report_type": self.report_type.value,
            "week_start": start.isoformat(),
            "week_end": end.isoformat(),
            "stats": stats_for(rows),
            "daily_breakdown": group_rows(rows, ReportGrouping.DAY),
            "records": self.records(ctx, rows),
        }


class MonthlyReportBuilder(ReportBuilder):
    report_type = ReportType.MONTHLY

    def build(self, ctx: ReportContext) -> dict:
        filters = ctx.request.filters
        year = filters.year or ctx.today.year
        month = filters.month or ctx.today.month
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])

        rows = in_calendar_order(r for r in ctx.rows if first <= r.calendar_date <= last)
        return {
            "report_type": self.report_type.value,
            "year": year,
            "month": month,
            "month_name": calendar.month_name[month],
            "stats": stats_for(rows),
            "weekly_breakdown": group_rows(rows, ReportGrouping.WEEK),
            "daily_breakdown": group_rows(rows, ReportGrouping.DAY),
            "records": self.records(ctx, rows),
        }
