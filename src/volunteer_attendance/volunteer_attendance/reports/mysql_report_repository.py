from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ReportType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import AttendanceReport
from .repository import ReportRepository


def _to_report(r: dict) -> AttendanceReport:
    return AttendanceReport(
        report_id=str(r["report_id"]),
        activity_id=str(r["activity_id"]),
        generated_by=str(r["generated_by"]),
        report_type=ReportType(r["report_type"]),
        generated_at=r["generated_at"],
        filters=load_json(r.get("filters")) or {},
        content=load_json(r.get("content")) or {},
    )


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def save(self, report: AttendanceReport) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_reports(
                    report_id, activity_id, generated_by, report_type, filters, content, generated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    report.report_id,
                    report.activity_id,
                    report.generated_by,
                    report.report_type.value,
                    dump_json(report.filters),
                    dump_json(report.content),
                    report.generated_at,
                ),
            )

    def get(self, report_id: str) -> Optional[AttendanceReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT report_id, activity_id, generated_by, report_type, filters, content, generated_at
                FROM attendance_reports
                WHERE report_id=%s
                """,
                (report_id,),
            )
            r = fetchone(cur)
            return _to_report(r) if r else None

    def list_for_activity(
        self,
        activity_id: str,
        *,
        report_type: Optional[ReportType] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Sequence[AttendanceReport]:
        clauses = ["activity_id=%s"]
        params: list[object] = [activity_id]
        if report_type is not None:
            clauses.append("report_type=%s")
            params.append(report_type.value)
        params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT report_id, activity_id, generated_by, report_type, filters, content, generated_at
                FROM attendance_reports
                WHERE {' AND '.join(clauses)}
                ORDER BY generated_at DESC, report_id ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params),
            )
            return [_to_report(r) for r in fetchall(cur)]

    def count_for_activity(self, activity_id: str, *, report_type: Optional[ReportType] = None) -> int:
        clauses = ["activity_id=%s"]
        params: list[object] = [activity_id]
        if report_type is not None:
            clauses.append("report_type=%s")
            params.append(report_type.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS total FROM attendance_reports WHERE {' AND '.join(clauses)}",
                tuple(params),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def delete(self, report_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_reports WHERE report_id=%s", (report_id,))
            return cur.rowcount > 0
