from datetime import datetime

import pytest

from src.volunteer_attendance.volunteer_attendance.activities.model import Activity
from src.volunteer_attendance.volunteer_attendance.attendance.policy import TimePolicy
from src.volunteer_attendance.volunteer_attendance.core.enums import ActivityStatus
from src.volunteer_attendance.volunteer_attendance.core.exceptions import ValidationError

ACTIVITY = Activity(
    activity_id="a",
    title="Food bank",
    start_at=datetime(2025, 3, 1, 10, 0),
    end_at=datetime(2025, 3, 1, 12, 0),
    status=ActivityStatus.SCHEDULED,
)


@pytest.mark.parametrize(
    "now, expected",
    [
        (datetime(2025, 3, 1, 9, 29, 59), "too early"),
        (datetime(2025, 3, 1, 9, 30, 0), None),
        (datetime(2025, 3, 1, 12, 0, 0), None),
        (datetime(2025, 3, 1, 12, 0, 1), "too late"),
    ],
)
def test_window_bounds_are_inclusive(now, expected):
    assert TimePolicy().window_rejection(ACTIVITY, now) == expected


def test_late_only_after_grace_period():
    policy = TimePolicy()

    assert not policy.is_late(ACTIVITY, datetime(2025, 3, 1, 10, 15))
    assert policy.is_late(ACTIVITY, datetime(2025, 3, 1, 10, 15, 1))


def test_early_leave_threshold():
    policy = TimePolicy()

    assert policy.is_early_leave(ACTIVITY, datetime(2025, 3, 1, 11, 29, 59))
    assert not policy.is_early_leave(ACTIVITY, datetime(2025, 3, 1, 11, 30))


def test_from_config_overrides_defaults():
    policy = TimePolicy.from_config({"LATE_GRACE_MINUTES": "5", "CHECKIN_OPENS_MINUTES_BEFORE_START": 60})

    assert policy.late_grace_minutes == 5
    assert policy.opens_minutes_before_start == 60
    assert policy.early_leave_minutes_before_end == 30
    assert policy.opens_at(ACTIVITY) == datetime(2025, 3, 1, 9, 0)


def test_negative_minutes_rejected():
    with pytest.raises(ValidationError):
        TimePolicy(late_grace_minutes=-1)
