from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from src.volunteer_attendance.volunteer_attendance.common.filters import parse_filters
from src.volunteer_attendance.volunteer_attendance.core.enums import ReportType
from src.volunteer_attendance.volunteer_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.volunteer_attendance.volunteer_attendance.reports.schemas import GenerateReportRequest, ReportListFilters

NOW = datetime(2025, 3, 1, 13, 0)


@pytest.fixture
def attended(container):
    service = container.attendance_service
    service.check_in("act-1", "u1", now=datetime(2025, 3, 1, 9, 45))
    service.check_out("act-1", "u1", now=datetime(2025, 3, 1, 11, 50))
    service.check_in("act-1", "u2", now=datetime(2025, 3, 1, 10, 40))
    service.check_out("act-1", "u2", now=datetime(2025, 3, 1, 11, 0))
    service.mark_absence("act-1", "u3", now=datetime(2025, 3, 1, 12, 30))
    return container


def _generate(container, payload, *, by="organizer-1"):
    request = parse_filters(GenerateReportRequest, payload)
    return container.report_service.generate("act-1", by, request, now=NOW)


def test_daily_report_places_absences_on_the_scheduled_day(attended):
    report = _generate(attended, {"report_type": "DAILY", "filters": {"date": "2025-03-01"}})

    content = report.content
    assert content["date"] == "2025-03-01"
    assert content["stats"]["total"] == 3
    assert [r["user_id"] for r in content["records"]] == ["u1", "u3", "u2"]


def test_daily_report_defaults_to_today(attended):
    report = _generate(attended, {"report_type": "DAILY"})

    assert report.content["date"] == "2025-03-01"


def test_weekly_report_uses_sunday_week(attended):
    report = _generate(attended, {"report_type": "WEEKLY"})

    assert report.content["week_start"] == "2025-02-23"
    assert report.content["week_end"] == "2025-03-01"
    assert report.content["daily_breakdown"][0]["date"] == "2025-03-01"


def test_monthly_report_breakdowns(attended):
    report = _generate(attended, {"report_type": "MONTHLY", "filters": {"year": 2025, "month": 3}})

    content = report.content
    assert content["month_name"] == "March"
    assert content["weekly_breakdown"] == [
        {"week_start": "2025-02-23", "total": 3, "stats": content["stats"]}
    ]


def test_activity_summary(attended):
    report = _generate(attended, {"include_activity_details": True, "include_user_details": True})

    content = report.content
    assert report.report_type == ReportType.ACTIVITY_SUMMARY
    assert content["activity"]["city"] == "Lisbon"
    assert content["total_participants"] == 3
    assert content["stats"]["early_leave_count"] == 1
    assert [p["user_id"] for p in content["participant_stats"]] == ["u1", "u2", "u3"]
    assert content["records"][0]["user"]["email"] == "u1@example.org"


def test_participant_summary_requires_user(attended, reports_repo):
    with pytest.raises(ValidationError):
        _generate(attended, {"report_type": "PARTICIPANT_SUMMARY"})

    assert reports_repo.reports == {}


def test_participant_summary_time_analysis(attended):
    report = _generate(attended, {"report_type": "PARTICIPANT_SUMMARY", "filters": {"user_id": "u2"}})

    assert report.content["time_analysis"] == {
        "average_check_in": 10,
        "average_check_out": 11,
        "total_check_ins": 1,
        "total_check_outs": 1,
    }


def test_custom_report_grouped_by_user(attended):
    report = _generate(
        attended,
        {"report_type": "CUSTOM", "filters": {"group_by": "user", "status": "EARLY_LEAVE"}},
    )

    assert report.content["grouped_data"] == [
        {"user_id": "u2", "total": 1, "stats": report.content["stats"]}
    ]
    assert report.filters == {"group_by": "user", "status": "EARLY_LEAVE"}


def test_generate_for_missing_activity(container):
    with pytest.raises(NotFoundError):
        container.report_service.generate("missing", "organizer-1", GenerateReportRequest(), now=NOW)


def test_list_get_and_delete(attended):
    service = attended.report_service
    first = _generate(attended, {"report_type": "DAILY"})
    second = _generate(attended, {"report_type": "CUSTOM"})

    listing = service.list_reports("act-1", ReportListFilters(report_type=ReportType.CUSTOM))
    assert listing["total"] == 1
    assert listing["reports"][0]["id"] == second.report_id
    assert "content" not in listing["reports"][0]

    assert service.get_report(first.report_id).content == first.content

    with pytest.raises(AuthorizationError):
        service.delete_report(first.report_id, "someone-else")
    service.delete_report(first.report_id, "organizer-1")
    with pytest.raises(NotFoundError):
        service.get_report(first.report_id)


def test_snapshot_is_not_refreshed(attended, activities):
    report = _generate(attended, {"report_type": "ACTIVITY_SUMMARY"})
    activities.rosters["act-1"].append("u4")
    attended.attendance_service.check_in("act-1", "u4", now=datetime(2025, 3, 1, 11, 0))

    stored = attended.report_service.get_report(report.report_id)
    assert stored.content["stats"]["total"] == 3
    assert attended.attendance_service.attendance_stats("act-1")["total"] == 4


def test_custom_report_filters_by_user_type(attended, users):
    users.profiles["u2"] = replace(users.profiles["u2"], user_type="ORGANIZATION")

    report = _generate(attended, {"report_type": "CUSTOM", "filters": {"user_type": "VOLUNTEER"}})

    assert [r["user_id"] for r in report.content["records"]] == ["u1", "u3"]
    assert report.content["stats"]["total"] == 2
    assert "user" not in report.content["records"][0]
    assert report.filters == {"group_by": "day", "user_type": "VOLUNTEER"}
