from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime

import pytest

from src.volunteer_attendance.volunteer_attendance.activities.model import Activity
from src.volunteer_attendance.volunteer_attendance.attendance.model import AttendanceRow
from src.volunteer_attendance.volunteer_attendance.attendance.policy import TimePolicy
from src.volunteer_attendance.volunteer_attendance.confirmations.model import ConfirmationRow, ConfirmationState
from src.volunteer_attendance.volunteer_attendance.container import wire
from src.volunteer_attendance.volunteer_attendance.core.constants import PRESENT_STATUSES
from src.volunteer_attendance.volunteer_attendance.core.enums import ActivityStatus, ConfirmationStatus
from src.volunteer_attendance.volunteer_attendance.users.model import UserProfile


class FakeActivityDirectory:
    def __init__(self):
        self.activities: dict[str, Activity] = {}
        self.rosters: dict[str, list[str]] = {}
        self.present_counts: dict[str, int] = {}
        self.fail_counter_updates = False

    def add(self, activity: Activity, participants=()):
        self.activities[activity.activity_id] = activity
        self.rosters[activity.activity_id] = list(participants)
        return activity

    def get_activity(self, activity_id):
        return self.activities.get(activity_id)

    def is_participant(self, activity_id, user_id):
        return user_id in self.rosters.get(activity_id, [])

    def list_participants(self, activity_id):
        return list(self.rosters.get(activity_id, []))

    def update_present_count(self, activity_id, count):
        if self.fail_counter_updates:
            raise RuntimeError("directory unavailable")
        self.present_counts[activity_id] = count


class FakeUserDirectory:
    def __init__(self):
        self.profiles: dict[str, UserProfile] = {}

    def get_profiles(self, user_ids):
        return {u: self.profiles[u] for u in user_ids if u in self.profiles}


class FakeAttendanceRepo:
    """In-memory records; the lock plays the role of the unique key."""

    def __init__(self, activities: FakeActivityDirectory):
        self._activities = activities
        self._lock = threading.Lock()
        self._next_id = 1
        self.records = {}

    def get(self, activity_id, user_id):
        return self.records.get((activity_id, user_id))

    def insert(self, record):
        with self._lock:
            key = (record.activity_id, record.user_id)
            if key in self.records:
                return None
            record_id = self._next_id
            self._next_id += 1
            self.records[key] = replace(record, record_id=record_id)
            return record_id

    def complete_checkout(self, *, record_id, check_out_time, status, notes=None):
        with self._lock:
            for key, rec in self.records.items():
                if rec.record_id != record_id:
                    continue
                if rec.check_in_time is None or rec.check_out_time is not None:
                    return False
                self.records[key] = replace(
                    rec, check_out_time=check_out_time, status=status, notes=notes, updated_at=check_out_time
                )
                return True
            return False

    def count_present(self, activity_id):
        return sum(1 for r in self.records.values() if r.activity_id == activity_id and r.status in PRESENT_STATUSES)

    def list_rows(
        self,
        *,
        activity_id=None,
        user_id=None,
        status=None,
        activity_status=None,
        start_at=None,
        end_at=None,
        limit=None,
        offset=0,
    ):
        rows = []
        for rec in self.records.values():
            activity = self._activities.get_activity(rec.activity_id)
            if activity_id is not None and rec.activity_id != activity_id:
                continue
            if user_id is not None and rec.user_id != user_id:
                continue
            if status is not None and rec.status != status:
                continue
            if activity_status is not None and activity.status != activity_status:
                continue
            if start_at is not None and activity.start_at < start_at:
                continue
            if end_at is not None and activity.start_at > end_at:
                continue
            rows.append(
                AttendanceRow(
                    record=rec,
                    activity_title=activity.title,
                    activity_start=activity.start_at,
                    activity_end=activity.end_at,
                    activity_status=activity.status,
                )
            )
        rows.sort(key=lambda r: (r.activity_id, r.user_id))
        rows.sort(key=lambda r: r.activity_start, reverse=True)
        if limit is not None:
            rows = rows[offset : offset + limit]
        return rows


class FakeConfirmationRepo:
    def __init__(self, activities: FakeActivityDirectory):
        self._activities = activities
        self.states: dict[tuple, ConfirmationState] = {}

    def get(self, activity_id, user_id):
        return self.states.get((activity_id, user_id))

    def upsert(self, state):
        key = (state.activity_id, state.user_id)
        current = self.states.get(key)
        if current:
            state = replace(
                current,
                status=state.status,
                notes=state.notes,
                confirmed_at=state.confirmed_at,
                declined_at=state.declined_at,
                updated_at=state.updated_at,
            )
        self.states[key] = state

    def mark_reminder_sent(self, *, activity_id, user_id, sent_at):
        key = (activity_id, user_id)
        current = self.states.get(key) or ConfirmationState(
            activity_id=activity_id, user_id=user_id, created_at=sent_at
        )
        self.states[key] = replace(current, reminder_sent=True, reminder_sent_at=sent_at, updated_at=sent_at)

    def list_for_activity(self, activity_id, *, status=None, limit=None, offset=0):
        states = [
            s for s in self.states.values() if s.activity_id == activity_id and (status is None or s.status == status)
        ]
        states.sort(key=lambda s: (s.created_at, s.user_id))
        if limit is not None:
            states = states[offset : offset + limit]
        return states

    def list_for_user(
        self, user_id, *, status=None, activity_status=None, start_at=None, end_at=None, limit=None, offset=0
    ):
        rows = []
        for s in self.states.values():
            activity = self._activities.get_activity(s.activity_id)
            if s.user_id != user_id or (status is not None and s.status != status):
                continue
            if activity_status is not None and activity.status != activity_status:
                continue
            if (start_at and activity.start_at < start_at) or (end_at and activity.start_at > end_at):
                continue
            rows.append(
                ConfirmationRow(
                    confirmation=s,
                    activity_title=activity.title,
                    activity_start=activity.start_at,
                    activity_end=activity.end_at,
                    activity_status=activity.status,
                )
            )
        rows.sort(key=lambda r: (r.activity_start, r.confirmation.activity_id))
        if limit is not None:
            rows = rows[offset : offset + limit]
        return rows

    def status_map(self, activity_id):
        return {s.user_id: s.status for s in self.states.values() if s.activity_id == activity_id}


class FakeReportRepo:
    def __init__(self):
        self.reports = {}

    def save(self, report):
        self.reports[report.report_id] = report

    def get(self, report_id):
        return self.reports.get(report_id)

    def _for_activity(self, activity_id, report_type):
        return [
            r
            for r in self.reports.values()
            if r.activity_id == activity_id and (report_type is None or r.report_type == report_type)
        ]

    def list_for_activity(self, activity_id, *, report_type=None, limit=10, offset=0):
        reports = sorted(self._for_activity(activity_id, report_type), key=lambda r: r.report_id)
        reports.sort(key=lambda r: r.generated_at, reverse=True)
        return reports[offset : offset + limit]

    def count_for_activity(self, activity_id, *, report_type=None):
        return len(self._for_activity(activity_id, report_type))

    def delete(self, report_id):
        return self.reports.pop(report_id, None) is not None


class FakeDispatcher:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.sent: list[str] = []

    def send_reminder(self, *, activity, user_id):
        if user_id in self.failing:
            raise ConnectionError("mail server down")
        self.sent.append(user_id)


def make_activity(activity_id="act-1", *, start=None, end=None, status=ActivityStatus.SCHEDULED, title="Beach cleanup"):
    return Activity(
        activity_id=activity_id,
        title=title,
        start_at=start or datetime(2025, 3, 1, 10, 0),
        end_at=end or datetime(2025, 3, 1, 12, 0),
        status=status,
        city="Lisbon",
    )


@pytest.fixture
def activities():
    directory = FakeActivityDirectory()
    directory.add(make_activity(), participants=["u1", "u2", "u3"])
    return directory


@pytest.fixture
def users():
    directory = FakeUserDirectory()
    for uid, name in [("u1", "Ana"), ("u2", "Bruno"), ("u3", "Chen")]:
        directory.profiles[uid] = UserProfile(user_id=uid, email=f"{uid}@example.org", display_name=name, user_type="VOLUNTEER")
    return directory


@pytest.fixture
def attendance_repo(activities):
    return FakeAttendanceRepo(activities)


@pytest.fixture
def confirmations_repo(activities):
    return FakeConfirmationRepo(activities)


@pytest.fixture
def reports_repo():
    return FakeReportRepo()


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def container(activities, users, attendance_repo, confirmations_repo, reports_repo, dispatcher):
    return wire(
        activities=activities,
        users=users,
        attendance_repo=attendance_repo,
        confirmations_repo=confirmations_repo,
        reports_repo=reports_repo,
        policy=TimePolicy(),
        dispatcher=dispatcher,
    )


@pytest.fixture
def confirmed(confirmations_repo):
    """Mark users as CONFIRMED for act-1 without going through the service."""

    def _confirm(*user_ids, activity_id="act-1"):
        for uid in user_ids:
            confirmations_repo.upsert(
                ConfirmationState(
                    activity_id=activity_id,
                    user_id=uid,
                    status=ConfirmationStatus.CONFIRMED,
                    created_at=datetime(2025, 2, 20, 9, 0),
                )
            )

    return _confirm


@pytest.fixture
def add_activity(activities):
    def _add(activity_id, *, participants=(), **kwargs):
        return activities.add(make_activity(activity_id, **kwargs), participants=participants)

    return _add
