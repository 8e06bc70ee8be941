from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from ..activities.directory import ActivityDirectory
from ..attendance.model import AttendanceRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import period_key
from ..core.exceptions import NotFoundError
from ..users.directory import UserDirectory
from .schemas import ActivityFrequencyFilters, FrequencyFilters, PeriodFilters
from .stats import average_rate, compute_stats, status_breakdown

logger = logging.getLogger(__name__)


def group_by_user(rows: Sequence[AttendanceRow]) -> Dict[str, List[AttendanceRow]]:
    grouped: Dict[str, List[AttendanceRow]] = defaultdict(list)
    for row in rows:
        grouped[row.user_id].append(row)
    return grouped


class FrequencyService:
    """Attendance frequency per user, per activity and per calendar period."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        activities: ActivityDirectory,
        *,
        users: UserDirectory | None = None,
    ):
        self._attendance = attendance
        self._activities = activities
        self._users = users

    def user_frequency(self, user_id: str, filters: FrequencyFilters) -> dict:
        rows = self._attendance.list_rows(
            user_id=user_id,
            activity_status=filters.activity_status,
            start_at=filters.start_at,
            end_at=filters.end_at,
        )
        stats = compute_stats(r.status for r in rows)
        data = {"user_id": user_id, "total_activities": stats.total, **stats.to_dict()}
        if filters.include_records:
            data["records"] = [r.to_dict(include_activity=True) for r in rows]
        return data

    def activity_frequency(self, activity_id: str, filters: ActivityFrequencyFilters) -> dict:
        if not self._activities.get_activity(activity_id):
            raise NotFoundError("Activity not found")

        rows = self._attendance.list_rows(activity_id=activity_id)
        stats = compute_stats(r.status for r in rows)
        data = {"activity_id": activity_id, "total_participants": stats.total, **stats.to_dict()}
        if filters.include_records:
            records = [r.to_dict() for r in rows]
            if filters.include_user_details and self._users:
                profiles = self._users.get_profiles(r.user_id for r in rows)
                for item, row in zip(records, rows):
                    profile = profiles.get(row.user_id)
                    item["user"] = profile.to_dict() if profile else None
            data["records"] = records
        return data

    def by_period(self, filters: PeriodFilters) -> List[dict]:
        """Bucket records by the activity's scheduled start, ascending by period key."""

        rows = self._attendance.list_rows(
            user_id=filters.user_id,
            activity_status=filters.activity_status,
            start_at=filters.start_at,
            end_at=filters.end_at,
        )
        buckets: Dict[str, list] = defaultdict(list)
        for row in rows:
            buckets[period_key(row.activity_start.date(), filters.group_by)].append(row.status)

        return [
            {"period": key, **compute_stats(buckets[key]).to_dict()}
            for key in sorted(buckets)
        ]

    def general_stats(self, filters: FrequencyFilters) -> dict:
        rows = self._attendance.list_rows(
            activity_status=filters.activity_status,
            start_at=filters.start_at,
            end_at=filters.end_at,
        )
        per_user = group_by_user(rows)
        per_user_stats = [compute_stats(r.status for r in user_rows) for user_rows in per_user.values()]
        return {
            "total_records": len(rows),
            "by_status": status_breakdown(r.status for r in rows),
            "average_attendance_rate": average_rate(per_user_stats),
            "total_users": len(per_user),
            "total_activities": len({r.activity_id for r in rows}),
        }
