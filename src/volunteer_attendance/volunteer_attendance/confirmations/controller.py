from __future__ import annotations

from flask import Flask

from ..common.auth import current_user_id, json_body, login_required, organizer_required, query_args, require_self_or_admin
from ..common.filters import parse_filters
from ..common.responses import success
from ..container import Container
from ..core.enums import ConfirmationStatus
from .schemas import ActivityConfirmationFilters, ConfirmationData, ReminderRequest, UserConfirmationFilters

_MESSAGES = {
    ConfirmationStatus.CONFIRMED: "Attendance confirmed",
    ConfirmationStatus.DECLINED: "Attendance declined",
    ConfirmationStatus.MAYBE: "Attendance marked as maybe",
}


def register(app: Flask, container: Container) -> None:
    service = container.confirmation_service

    def _set(activity_id: str, status: ConfirmationStatus):
        data = parse_filters(ConfirmationData, json_body())
        state = service.set_confirmation(activity_id, current_user_id(), status, data.notes)
        return success(state.to_dict(), _MESSAGES[status])

    @app.route("/api/activities/<activity_id>/confirm", methods=["POST"], endpoint="confirm_attendance")
    @login_required
    def confirm_attendance(activity_id: str):
        return _set(activity_id, ConfirmationStatus.CONFIRMED)

    @app.route("/api/activities/<activity_id>/decline", methods=["POST"], endpoint="decline_attendance")
    @login_required
    def decline_attendance(activity_id: str):
        return _set(activity_id, ConfirmationStatus.DECLINED)

    @app.route("/api/activities/<activity_id>/maybe", methods=["POST"], endpoint="maybe_attendance")
    @login_required
    def maybe_attendance(activity_id: str):
        return _set(activity_id, ConfirmationStatus.MAYBE)

    @app.route("/api/activities/<activity_id>/confirmations", methods=["GET"], endpoint="activity_confirmations")
    @login_required
    def activity_confirmations(activity_id: str):
        filters = parse_filters(ActivityConfirmationFilters, query_args())
        return success(service.list_for_activity(activity_id, filters))

    @app.route(
        "/api/activities/<activity_id>/confirmations/stats", methods=["GET"], endpoint="activity_confirmation_stats"
    )
    @login_required
    def activity_confirmation_stats(activity_id: str):
        return success(service.confirmation_stats(activity_id))

    @app.route("/api/users/<user_id>/confirmations", methods=["GET"], endpoint="user_confirmations")
    @login_required
    def user_confirmations(user_id: str):
        require_self_or_admin(user_id)
        filters = parse_filters(UserConfirmationFilters, query_args())
        return success(service.list_for_user(user_id, filters))

    @app.route(
        "/api/activities/<activity_id>/confirmations/reminders", methods=["POST"], endpoint="send_confirmation_reminders"
    )
    @organizer_required
    def send_confirmation_reminders(activity_id: str):
        data = parse_filters(ReminderRequest, json_body())
        result = service.send_reminders(activity_id, data.user_ids)
        return success(result.to_dict(), f"{result.total_sent} reminders sent")
