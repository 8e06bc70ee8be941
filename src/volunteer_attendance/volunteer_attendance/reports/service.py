from __future__ import annotations

import logging
import uuid
from datetime import datetime

from ..activities.directory import ActivityDirectory
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.exceptions import AuthorizationError, NotFoundError
from ..users.directory import UserDirectory
from .builders.base import ReportContext
from .factory import ReportBuilderFactory
from .model import AttendanceReport
from .repository import ReportRepository
from .schemas import GenerateReportRequest, ReportListFilters

logger = logging.getLogger(__name__)


class ReportService:
    """Generate, store and manage immutable attendance report snapshots.

    A snapshot reflects the records present at generation time and is never
    refreshed afterwards; generate a new report to see later changes.
    """

    def __init__(
        self,
        reports: ReportRepository,
        attendance: AttendanceRepository,
        activities: ActivityDirectory,
        *,
        users: UserDirectory | None = None,
        builder_factory: ReportBuilderFactory | None = None,
    ):
        self._reports = reports
        self._attendance = attendance
        self._activities = activities
        self._users = users
        self._factory = builder_factory or ReportBuilderFactory()

    def generate(
        self,
        activity_id: str,
        requested_by: str,
        request: GenerateReportRequest,
        *,
        now: datetime | None = None,
    ) -> AttendanceReport:
        now = now or now_local()
        activity = self._activities.get_activity(activity_id)
        if not activity:
            raise NotFoundError("Activity not found")

        rows = self._attendance.list_rows(activity_id=activity_id)
        profiles = {}
        # The user type filter needs profiles even without user details.
        if (request.include_user_details or request.filters.user_type) and self._users:
            profiles = self._users.get_profiles(r.user_id for r in rows)

        ctx = ReportContext(
            activity=activity,
            rows=rows,
            request=request,
            today=now.date(),
            participants=self._activities.list_participants(activity_id),
            profiles=profiles,
        )
        content = self._factory.for_type(request.report_type).build(ctx)

        report = AttendanceReport(
            report_id=str(uuid.uuid4()),
            activity_id=activity_id,
            generated_by=requested_by,
            report_type=request.report_type,
            generated_at=now,
            filters=request.filters.model_dump(mode="json", exclude_none=True),
            content=content,
        )
        self._reports.save(report)
        logger.info(
            "Report %s (%s) generated for activity %s by %s",
            report.report_id,
            report.report_type.value,
            activity_id,
            requested_by,
        )
        return report

    def list_reports(self, activity_id: str, filters: ReportListFilters) -> dict:
        if not self._activities.get_activity(activity_id):
            raise NotFoundError("Activity not found")

        reports = self._reports.list_for_activity(
            activity_id,
            report_type=filters.report_type,
            limit=filters.limit,
            offset=filters.offset,
        )
        return {
            "reports": [r.to_dict(include_content=False) for r in reports],
            "total": self._reports.count_for_activity(activity_id, report_type=filters.report_type),
            "limit": filters.limit,
            "offset": filters.offset,
        }

    def get_report(self, report_id: str) -> AttendanceReport:
        report = self._reports.get(report_id)
        if not report:
            raise NotFoundError("Report not found")
        return report

    def delete_report(self, report_id: str, requested_by: str) -> None:
        report = self.get_report(report_id)
        if report.generated_by != requested_by:
            raise AuthorizationError("Only the user who generated a report can delete it")

        if not self._reports.delete(report_id):
            raise NotFoundError("Report not found")
        logger.info("Report %s deleted by %s", report_id, requested_by)
