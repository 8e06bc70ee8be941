from __future__ import annotations

from flask import Flask

from ..common.auth import current_user_id, json_body, login_required, organizer_required, query_args
from ..common.filters import parse_filters
from ..common.responses import success
from ..container import Container
from .schemas import GenerateReportRequest, ReportListFilters


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    @app.route("/api/activities/<activity_id>/reports", methods=["POST"], endpoint="generate_report")
    @organizer_required
    def generate_report(activity_id: str):
        request_data = parse_filters(GenerateReportRequest, json_body())
        report = service.generate(activity_id, current_user_id(), request_data)
        return success(report.to_dict(), "Report generated", 201)

    @app.route("/api/activities/<activity_id>/reports", methods=["GET"], endpoint="list_reports")
    @login_required
    def list_reports(activity_id: str):
        filters = parse_filters(ReportListFilters, query_args())
        return success(service.list_reports(activity_id, filters))

    @app.route("/api/reports/<report_id>", methods=["GET"], endpoint="get_report")
    @login_required
    def get_report(report_id: str):
        return success(service.get_report(report_id).to_dict())

    @app.route("/api/reports/<report_id>", methods=["DELETE"], endpoint="delete_report")
    @login_required
    def delete_report(report_id: str):
        service.delete_report(report_id, current_user_id())
        return success(message="Report deleted")
