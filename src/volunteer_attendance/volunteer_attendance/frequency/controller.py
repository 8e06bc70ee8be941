from __future__ import annotations

from flask import Flask

from ..common.auth import current_user_id, is_admin, login_required, query_args, require_self_or_admin
from ..common.filters import parse_filters
from ..common.responses import success
from ..container import Container
from .schemas import ActivityFrequencyFilters, AlertFilters, FrequencyFilters, PeriodFilters, RankingFilters


def register(app: Flask, container: Container) -> None:
    frequency = container.frequency_service
    ranking = container.ranking_service

    @app.route("/api/users/<user_id>/frequency", methods=["GET"], endpoint="user_frequency")
    @login_required
    def user_frequency(user_id: str):
        require_self_or_admin(user_id)
        filters = parse_filters(FrequencyFilters, query_args())
        return success(frequency.user_frequency(user_id, filters))

    @app.route("/api/activities/<activity_id>/frequency", methods=["GET"], endpoint="activity_frequency")
    @login_required
    def activity_frequency(activity_id: str):
        filters = parse_filters(ActivityFrequencyFilters, query_args())
        return success(frequency.activity_frequency(activity_id, filters))

    @app.route("/api/attendance/frequency/periods", methods=["GET"], endpoint="frequency_by_period")
    @login_required
    def frequency_by_period():
        filters = parse_filters(PeriodFilters, query_args())
        # Only admins may aggregate across everyone.
        if filters.user_id is None and not is_admin():
            filters = filters.model_copy(update={"user_id": current_user_id()})
        if filters.user_id is not None:
            require_self_or_admin(filters.user_id)
        return success(frequency.by_period(filters))

    @app.route("/api/attendance/ranking", methods=["GET"], endpoint="attendance_ranking")
    @login_required
    def attendance_ranking():
        filters = parse_filters(RankingFilters, query_args())
        return success(ranking.ranking(filters))

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_general_stats")
    @login_required
    def attendance_general_stats():
        filters = parse_filters(FrequencyFilters, query_args())
        return success(frequency.general_stats(filters))

    @app.route("/api/users/<user_id>/attendance-alerts", methods=["GET"], endpoint="attendance_alerts")
    @login_required
    def attendance_alerts(user_id: str):
        require_self_or_admin(user_id)
        filters = parse_filters(AlertFilters, query_args())
        return success(ranking.alerts(user_id, filters))
