from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Type

from ..core.enums import ReportType
from .builders.base import ReportBuilder
from .builders.custom import CustomReportBuilder
from .builders.periodic import DailyReportBuilder, MonthlyReportBuilder, WeeklyReportBuilder
from .builders.summary import ActivitySummaryReportBuilder, ParticipantSummaryReportBuilder

_BUILDERS: Dict[ReportType, Type[ReportBuilder]] = {
    b.report_type: b
    for b in (
        DailyReportBuilder,
        WeeklyReportBuilder,
        MonthlyReportBuilder,
        ActivitySummaryReportBuilder,
        ParticipantSummaryReportBuilder,
        CustomReportBuilder,
    )
}


@dataclass
class ReportBuilderFactory:
    """Factory Pattern: pick the builder for a report type."""

    builders: Dict[ReportType, Type[ReportBuilder]] = field(default_factory=lambda: dict(_BUILDERS))

    def for_type(self, report_type: ReportType) -> ReportBuilder:
        return self.builders[report_type]()
