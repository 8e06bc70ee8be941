from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import FREQUENT_EARLY_LEAVE_THRESHOLD, FREQUENT_LATE_THRESHOLD
from ..core.enums import ActivityStatus, AlertSeverity, AlertType
from ..users.directory import UserDirectory
from .schemas import AlertFilters, RankingFilters
from .service import group_by_user
from .stats import compute_stats, percent

logger = logging.getLogger(__name__)


class RankingService:
    """Leaderboard and informational alerts built on attendance frequency."""

    def __init__(self, attendance: AttendanceRepository, *, users: UserDirectory | None = None):
        self._attendance = attendance
        self._users = users

    def ranking(self, filters: RankingFilters) -> List[dict]:
        rows = self._attendance.list_rows(
            activity_status=filters.activity_status,
            start_at=filters.start_at,
            end_at=filters.end_at,
        )
        entries = [
            {"user_id": user_id, **compute_stats(r.status for r in user_rows).to_dict()}
            for user_id, user_rows in group_by_user(rows).items()
        ]
        entries.sort(key=lambda e: (-e["attendance_rate"], e["user_id"]))
        entries = entries[: filters.limit]

        for position, entry in enumerate(entries, start=1):
            entry["rank"] = position

        if filters.include_user_details and self._users:
            profiles = self._users.get_profiles(e["user_id"] for e in entries)
            for entry in entries:
                profile = profiles.get(entry["user_id"])
                entry["user"] = profile.to_dict() if profile else None
        return entries

    def alerts(self, user_id: str, filters: AlertFilters, *, now: datetime | None = None) -> dict:
        now = now or now_local()
        rows = self._attendance.list_rows(
            user_id=user_id,
            activity_status=ActivityStatus.COMPLETED,
            start_at=now - timedelta(days=filters.days),
            end_at=now,
        )
        stats = compute_stats(r.status for r in rows)
        alerts: List[dict] = []

        if stats.attendance_rate < filters.min_attendance_rate:
            alerts.append(
                {
                    "type": AlertType.LOW_ATTENDANCE.value,
                    "severity": AlertSeverity.WARNING.value,
                    "message": f"Attendance rate is {stats.attendance_rate}%, below the expected "
                    f"{filters.min_attendance_rate}%.",
                    "data": {"current_rate": stats.attendance_rate, "min_rate": filters.min_attendance_rate},
                }
            )

        if stats.present_count and stats.late_count / stats.present_count > FREQUENT_LATE_THRESHOLD:
            late_rate = percent(stats.late_count, stats.present_count)
            alerts.append(
                {
                    "type": AlertType.FREQUENT_LATE.value,
                    "severity": AlertSeverity.INFO.value,
                    "message": f"Arrived late to {late_rate}% of attended activities.",
                    "data": {"late_rate": late_rate, "late_count": stats.late_count},
                }
            )

        if stats.present_count and stats.early_leave_count / stats.present_count > FREQUENT_EARLY_LEAVE_THRESHOLD:
            early_rate = percent(stats.early_leave_count, stats.present_count)
            alerts.append(
                {
                    "type": AlertType.FREQUENT_EARLY_LEAVE.value,
                    "severity": AlertSeverity.INFO.value,
                    "message": f"Left early from {early_rate}% of attended activities.",
                    "data": {"early_leave_rate": early_rate, "early_leave_count": stats.early_leave_count},
                }
            )

        if alerts:
            logger.info("User %s has %d attendance alerts", user_id, len(alerts))
        return {
            "user_id": user_id,
            "alerts": alerts,
            "frequency": {"total_activities": stats.total, **stats.to_dict()},
        }
