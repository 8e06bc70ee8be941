from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.volunteer_attendance.volunteer_attendance.attendance.model import AttendanceRecord
from src.volunteer_attendance.volunteer_attendance.core.enums import ActivityStatus, AttendanceStatus, PeriodGrouping
from src.volunteer_attendance.volunteer_attendance.frequency.schemas import (
    ActivityFrequencyFilters,
    AlertFilters,
    FrequencyFilters,
    PeriodFilters,
    RankingFilters,
)
from src.volunteer_attendance.volunteer_attendance.frequency.stats import compute_stats, percent

P, L, E, A = AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.EARLY_LEAVE, AttendanceStatus.ABSENT


@pytest.fixture
def history(activities, add_activity, attendance_repo):
    """Completed activities on consecutive days starting Sunday 2025-03-02."""

    def _load(user_id, statuses, *, first_day=datetime(2025, 3, 2, 10, 0)):
        for i, status in enumerate(statuses):
            start = first_day + timedelta(days=i)
            activity_id = f"hist-{i}"
            if activity_id not in activities.activities:
                add_activity(activity_id, start=start, end=start + timedelta(hours=2), status=ActivityStatus.COMPLETED)
            attendance_repo.insert(
                AttendanceRecord(
                    activity_id=activity_id,
                    user_id=user_id,
                    status=status,
                    check_in_time=start if status != A else None,
                )
            )

    return _load


def test_percent_rounds_half_up_and_handles_zero():
    assert percent(7, 10) == 70
    assert percent(1, 8) == 13
    assert percent(2, 3) == 67
    assert percent(5, 0) == 0


def test_rates_are_bounded_integers():
    for present in range(0, 6):
        for late in range(0, present + 1):
            stats = compute_stats([L] * late + [P] * (present - late) + [A] * 3)
            assert isinstance(stats.attendance_rate, int) and 0 <= stats.attendance_rate <= 100
            assert isinstance(stats.punctuality_rate, int) and 0 <= stats.punctuality_rate <= 100


def test_seven_of_ten_attended(container, history):
    history("u1", [P, P, P, L, L, E, P, A, A, A])

    data = container.frequency_service.user_frequency("u1", FrequencyFilters())

    assert data["total_activities"] == 10
    assert data["present_count"] == 7
    assert data["late_count"] == 2
    assert data["attendance_rate"] == 70
    assert data["punctuality_rate"] == 71


def test_user_frequency_without_records(container):
    data = container.frequency_service.user_frequency("nobody", FrequencyFilters())

    assert data["attendance_rate"] == 0
    assert data["punctuality_rate"] == 0


def test_activity_status_filter_excludes_scheduled(container, history):
    history("u1", [P, P])
    container.attendance_service.check_in("act-1", "u1", now=datetime(2025, 3, 1, 10, 0))

    completed = container.frequency_service.user_frequency("u1", FrequencyFilters())
    everything = container.frequency_service.user_frequency("u1", FrequencyFilters(activity_status=None))

    assert completed["total_activities"] == 2
    assert everything["total_activities"] == 3


def test_activity_frequency_with_user_details(container, history):
    history("u1", [P])
    history("u2", [A])

    data = container.frequency_service.activity_frequency(
        "hist-0", ActivityFrequencyFilters(include_records=True, include_user_details=True)
    )

    assert data["total_participants"] == 2
    assert data["attendance_rate"] == 50
    assert {r["user"]["name"] for r in data["records"]} == {"Ana", "Bruno"}


def test_by_period_week_buckets_are_sunday_aligned(container, history):
    history("u1", [P] * 10)

    weeks = container.frequency_service.by_period(PeriodFilters(user_id="u1", group_by=PeriodGrouping.WEEK))
    months = container.frequency_service.by_period(PeriodFilters(user_id="u1", group_by=PeriodGrouping.MONTH))

    assert [w["period"] for w in weeks] == ["2025-03-02", "2025-03-09"]
    assert [w["total"] for w in weeks] == [7, 3]
    assert months == [{"period": "2025-03", **compute_stats([P] * 10).to_dict()}]


def test_general_stats_average(container, history):
    history("u1", [P, P, P])
    history("u2", [P, A, A])

    data = container.frequency_service.general_stats(FrequencyFilters())

    assert data["total_records"] == 6
    assert data["total_users"] == 2
    assert data["total_activities"] == 3
    assert data["average_attendance_rate"] == 67
    assert data["by_status"]["ABSENT"] == 2


def test_ranking_order_and_truncation(container, history):
    history("u1", [P, A])
    history("u2", [P, P])
    history("u3", [P, A])
    history("u4", [A, A])

    ranking = container.ranking_service.ranking(RankingFilters(limit=3, include_user_details=True))

    assert len(ranking) == 3
    assert [r["user_id"] for r in ranking] == ["u2", "u1", "u3"]
    assert [r["rank"] for r in ranking] == [1, 2, 3]
    rates = [r["attendance_rate"] for r in ranking]
    assert rates == sorted(rates, reverse=True)
    assert ranking[0]["user"]["name"] == "Bruno"


def test_alerts_for_low_attendance_and_lateness(container, history):
    history("u1", [L, L, P, A, A])

    data = container.ranking_service.alerts("u1", AlertFilters(), now=datetime(2025, 3, 20, 0, 0))
    types = {a["type"]: a for a in data["alerts"]}

    assert types["LOW_ATTENDANCE"]["severity"] == "WARNING"
    assert types["LOW_ATTENDANCE"]["data"] == {"current_rate": 60, "min_rate": 70}
    assert types["FREQUENT_LATE"]["data"] == {"late_rate": 67, "late_count": 2}
    assert "FREQUENT_EARLY_LEAVE" not in types
    assert data["frequency"]["total_activities"] == 5


def test_alerts_window_ignores_old_activities(container, history):
    history("u1", [L, L, L])

    data = container.ranking_service.alerts("u1", AlertFilters(days=7), now=datetime(2025, 4, 30, 0, 0))

    assert data["frequency"]["total_activities"] == 0
    assert [a["type"] for a in data["alerts"]] == ["LOW_ATTENDANCE"]


def test_low_attendance_alert_without_any_activity(container):
    data = container.ranking_service.alerts("nobody", AlertFilters(), now=datetime(2025, 4, 30, 0, 0))

    assert data["alerts"][0]["type"] == "LOW_ATTENDANCE"
    assert data["alerts"][0]["data"] == {"current_rate": 0, "min_rate": 70}
    assert len(data["alerts"]) == 1
