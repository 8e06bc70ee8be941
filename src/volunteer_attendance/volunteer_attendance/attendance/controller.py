from __future__ import annotations

from flask import Flask

from ..common.auth import current_user_id, json_body, login_required, organizer_required, query_args, require_self_or_admin
from ..common.filters import parse_filters
from ..common.responses import success
from ..container import Container
from .schemas import AbsenceData, ActivityRecordFilters, CheckInData, CheckOutData, UserRecordFilters


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/activities/<activity_id>/check-in", methods=["POST"], endpoint="check_in")
    @login_required
    def check_in(activity_id: str):
        data = parse_filters(CheckInData, json_body())
        record = service.check_in(activity_id, current_user_id(), data)
        return success(record.to_dict(), "Check-in recorded", 201)

    @app.route("/api/activities/<activity_id>/check-out", methods=["POST"], endpoint="check_out")
    @login_required
    def check_out(activity_id: str):
        data = parse_filters(CheckOutData, json_body())
        record = service.check_out(activity_id, current_user_id(), data)
        return success(record.to_dict(), "Check-out recorded")

    @app.route("/api/activities/<activity_id>/check-in/eligibility", methods=["GET"], endpoint="check_in_eligibility")
    @login_required
    def check_in_eligibility(activity_id: str):
        return success(service.can_check_in(activity_id, current_user_id()))

    @app.route(
        "/api/activities/<activity_id>/participants/<user_id>/absence", methods=["POST"], endpoint="mark_absence"
    )
    @organizer_required
    def mark_absence(activity_id: str, user_id: str):
        data = parse_filters(AbsenceData, json_body())
        record = service.mark_absence(activity_id, user_id, data)
        return success(record.to_dict(), "Absence recorded", 201)

    @app.route("/api/activities/<activity_id>/no-shows", methods=["POST"], endpoint="mark_no_shows")
    @organizer_required
    def mark_no_shows(activity_id: str):
        return success(service.mark_no_shows(activity_id))

    @app.route("/api/activities/<activity_id>/attendance", methods=["GET"], endpoint="activity_attendance")
    @login_required
    def activity_attendance(activity_id: str):
        filters = parse_filters(ActivityRecordFilters, query_args())
        return success(service.list_activity_records(activity_id, filters))

    @app.route("/api/activities/<activity_id>/attendance/stats", methods=["GET"], endpoint="activity_attendance_stats")
    @login_required
    def activity_attendance_stats(activity_id: str):
        return success(service.attendance_stats(activity_id))

    @app.route("/api/users/<user_id>/attendance", methods=["GET"], endpoint="user_attendance")
    @login_required
    def user_attendance(user_id: str):
        require_self_or_admin(user_id)
        filters = parse_filters(UserRecordFilters, query_args())
        return success(service.list_user_records(user_id, filters))
