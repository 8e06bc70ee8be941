from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.constants import PRESENT_STATUSES
from ..core.enums import ActivityStatus, AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, is_duplicate_key
from .model import AttendanceRecord, AttendanceRow
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    ar.record_id, ar.activity_id, ar.user_id, ar.check_in_time, ar.check_out_time, ar.status,
    ar.location, ar.latitude, ar.longitude, ar.device_info, ar.notes, ar.created_at, ar.updated_at
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        activity_id=str(r["activity_id"]),
        user_id=str(r["user_id"]),
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        location=r.get("location"),
        latitude=r.get("latitude"),
        longitude=r.get("longitude"),
        device_info=r.get("device_info"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, activity_id: str, user_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.activity_id=%s AND ar.user_id=%s
                """,
                (activity_id, user_id),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert(self, record: AttendanceRecord) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        activity_id, user_id, check_in_time, check_out_time, status,
                        location, latitude, longitude, device_info, notes, created_at, updated_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.activity_id,
                        record.user_id,
                        record.check_in_time,
                        record.check_out_time,
                        record.status.value,
                        record.location,
                        record.latitude,
                        record.longitude,
                        record.device_info,
                        record.notes,
                        record.created_at,
                        record.updated_at,
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            # The unique key on (activity_id, user_id) decides concurrent races.
            if is_duplicate_key(e):
                return None
            raise

    def complete_checkout(
        self,
        *,
        record_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s, notes=%s, updated_at=%s
                WHERE record_id=%s AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (check_out_time, status.value, notes, check_out_time, int(record_id)),
            )
            return cur.rowcount > 0

    def count_present(self, activity_id: str) -> int:
        statuses = sorted(s.value for s in PRESENT_STATUSES)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM attendance_records
                WHERE activity_id=%s AND status IN ({in_clause(statuses)})
                """,
                (activity_id, *statuses),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_rows(
        self,
        *,
        activity_id: Optional[str] = None,
        user_id: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
        activity_status: Optional[ActivityStatus] = None,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[AttendanceRow]:
        clauses: list[str] = []
        params: list[object] = []

        if activity_id is not None:
            clauses.append("ar.activity_id=%s")
            params.append(activity_id)
        if user_id is not None:
            clauses.append("ar.user_id=%s")
            params.append(user_id)
        if status is not None:
            clauses.append("ar.status=%s")
            params.append(status.value)
        if activity_status is not None:
            clauses.append("a.status=%s")
            params.append(activity_status.value)
        if start_at is not None:
            clauses.append("a.start_date >= %s")
            params.append(start_at)
        if end_at is not None:
            clauses.append("a.start_date <= %s")
            params.append(end_at)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        page = ""
        if limit is not None:
            page = "LIMIT %s OFFSET %s"
            params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS},
                    a.title AS activity_title, a.start_date AS activity_start,
                    a.end_date AS activity_end, a.status AS activity_status
                FROM attendance_records ar
                JOIN activities a ON a.activity_id = ar.activity_id
                {where}
                ORDER BY a.start_date DESC, ar.activity_id ASC, ar.user_id ASC
                {page}
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceRow(
                    record=_to_record(r),
                    activity_title=r["activity_title"],
                    activity_start=r["activity_start"],
                    activity_end=r["activity_end"],
                    activity_status=ActivityStatus(r["activity_status"]),
                )
                for r in rows
            ]
