from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import List

from ..activities.directory import ActivityDirectory
from ..common.datetime_utils import now_local
from ..confirmations.repository import ConfirmationRepository
from ..core.exceptions import ConflictError, NotFoundError
from ..frequency.stats import compute_stats, status_breakdown
from ..users.directory import UserDirectory
from . import transitions
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .schemas import AbsenceData, ActivityRecordFilters, CheckInData, CheckOutData, UserRecordFilters

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        activities: ActivityDirectory,
        *,
        confirmations: ConfirmationRepository | None = None,
        users: UserDirectory | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._activities = activities
        self._confirmations = confirmations
        self._users = users
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def _reject(self, rejection: transitions.Rejection, *, action: str, activity_id: str, user_id: str):
        logger.info("%s rejected for user %s on activity %s: %s", action, user_id, activity_id, rejection.message)
        raise rejection.to_error()

    def _push_present_count(self, activity_id: str) -> None:
        try:
            count = self._attendance.count_present(activity_id)
            self._activities.update_present_count(activity_id, count)
        except Exception:
            # The counter is a cached projection; the record itself is already stored.
            logger.exception("Could not update present participants for activity %s", activity_id)

    def check_in(
        self,
        activity_id: str,
        user_id: str,
        data: CheckInData | None = None,
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        activity = self._activities.get_activity(activity_id)
        is_participant = bool(activity) and self._activities.is_participant(activity_id, user_id)
        existing = self._attendance.get(activity_id, user_id) if activity else None

        outcome = transitions.check_in(
            activity=activity,
            user_id=user_id,
            is_participant=is_participant,
            existing=existing,
            data=data or CheckInData(),
            now=now,
            factory=self._factory,
        )
        if isinstance(outcome, transitions.Rejection):
            self._reject(outcome, action="Check-in", activity_id=activity_id, user_id=user_id)

        record_id = self._attendance.insert(outcome)
        if record_id is None:
            logger.info("Concurrent check-in lost for user %s on activity %s", user_id, activity_id)
            raise ConflictError("User has already checked in")

        record = replace(outcome, record_id=record_id)
        logger.info("User %s checked in to activity %s as %s", user_id, activity_id, record.status.value)
        self._push_present_count(activity_id)
        return record

    def can_check_in(self, activity_id: str, user_id: str, *, now: datetime | None = None) -> dict:
        now = now or now_local()
        activity = self._activities.get_activity(activity_id)
        is_participant = bool(activity) and self._activities.is_participant(activity_id, user_id)
        existing = self._attendance.get(activity_id, user_id) if activity else None

        rejection = transitions.evaluate_check_in(
            activity=activity,
            is_participant=is_participant,
            existing=existing,
            now=now,
            factory=self._factory,
        )
        if rejection:
            return {"allowed": False, "reason": rejection.reason or rejection.message, "code": rejection.kind.value}
        return {"allowed": True, "reason": None, "code": None}

    def check_out(
        self,
        activity_id: str,
        user_id: str,
        data: CheckOutData | None = None,
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        activity = self._activities.get_activity(activity_id)
        record = self._attendance.get(activity_id, user_id) if activity else None

        outcome = transitions.check_out(
            activity=activity,
            record=record,
            data=data or CheckOutData(),
            now=now,
            factory=self._factory,
        )
        if isinstance(outcome, transitions.Rejection):
            self._reject(outcome, action="Check-out", activity_id=activity_id, user_id=user_id)

        updated = self._attendance.complete_checkout(
            record_id=outcome.record_id,
            check_out_time=now,
            status=outcome.status,
            notes=outcome.notes,
        )
        if not updated:
            raise ConflictError("User has already checked out")

        logger.info("User %s checked out of activity %s as %s", user_id, activity_id, outcome.status.value)
        return outcome

    def mark_absence(
        self,
        activity_id: str,
        user_id: str,
        data: AbsenceData | None = None,
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        activity = self._activities.get_activity(activity_id)
        is_participant = bool(activity) and self._activities.is_participant(activity_id, user_id)
        existing = self._attendance.get(activity_id, user_id) if activity else None

        outcome = transitions.mark_absence(
            activity=activity,
            user_id=user_id,
            is_participant=is_participant,
            existing=existing,
            data=data or AbsenceData(),
            now=now,
        )
        if isinstance(outcome, transitions.Rejection):
            self._reject(outcome, action="Absence", activity_id=activity_id, user_id=user_id)

        record_id = self._attendance.insert(outcome)
        if record_id is None:
            raise ConflictError("Attendance is already recorded for this user")

        logger.info("User %s marked %s for activity %s", user_id, outcome.status.value, activity_id)
        return replace(outcome, record_id=record_id)

    def mark_no_shows(self, activity_id: str, *, now: datetime | None = None) -> dict:
        """Close every roster member without a record once the activity is over."""

        now = now or now_local()
        activity = self._activities.get_activity(activity_id)
        rejection = transitions.evaluate_no_show_sweep(activity=activity, now=now)
        if rejection:
            self._reject(rejection, action="No-show sweep", activity_id=activity_id, user_id="-")

        confirmations = self._confirmations.status_map(activity_id) if self._confirmations else {}
        created: List[AttendanceRecord] = []
        for uid in self._activities.list_participants(activity_id):
            record = transitions.mark_no_show(
                activity=activity,
                user_id=uid,
                existing=self._attendance.get(activity_id, uid),
                confirmation=confirmations.get(uid),
                now=now,
            )
            # A concurrent write may have created the row meanwhile; keep it.
            if record and self._attendance.insert(record) is not None:
                created.append(record)

        summary = status_breakdown(r.status for r in created)
        logger.info("No-show sweep for activity %s closed %d participants", activity_id, len(created))
        return {"activity_id": activity_id, "total_marked": len(created), "by_status": summary}

    def list_activity_records(self, activity_id: str, filters: ActivityRecordFilters) -> List[dict]:
        if not self._activities.get_activity(activity_id):
            raise NotFoundError("Activity not found")

        rows = self._attendance.list_rows(
            activity_id=activity_id,
            status=filters.status,
            limit=filters.limit,
            offset=filters.offset,
        )
        data = [r.to_dict() for r in rows]
        if filters.include_user_details and self._users:
            profiles = self._users.get_profiles(r.user_id for r in rows)
            for item, row in zip(data, rows):
                profile = profiles.get(row.user_id)
                item["user"] = profile.to_dict() if profile else None
        return data

    def list_user_records(self, user_id: str, filters: UserRecordFilters) -> List[dict]:
        rows = self._attendance.list_rows(
            user_id=user_id,
            status=filters.status,
            activity_status=filters.activity_status,
            start_at=filters.start_at,
            end_at=filters.end_at,
            limit=filters.limit,
            offset=filters.offset,
        )
        return [r.to_dict(include_activity=filters.include_activity_details) for r in rows]

    def attendance_stats(self, activity_id: str) -> dict:
        activity = self._activities.get_activity(activity_id)
        if not activity:
            raise NotFoundError("Activity not found")

        statuses = [r.status for r in self._attendance.list_rows(activity_id=activity_id)]
        data = compute_stats(statuses).to_dict()
        data["activity_id"] = activity_id
        data["total_participants"] = len(self._activities.list_participants(activity_id))
        data["by_status"] = status_breakdown(statuses)
        return data
