from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Sequence

from ..core.enums import ActivityStatus, ConfirmationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ConfirmationRow, ConfirmationState
from .repository import ConfirmationRepository

_COLUMNS = """
    c.activity_id, c.user_id, c.status, c.notes, c.confirmed_at, c.declined_at,
    c.reminder_sent, c.reminder_sent_at, c.created_at, c.updated_at
"""


def _to_state(r: dict) -> ConfirmationState:
    return ConfirmationState(
        activity_id=str(r["activity_id"]),
        user_id=str(r["user_id"]),
        status=ConfirmationStatus(r["status"]),
        notes=r.get("notes"),
        confirmed_at=r.get("confirmed_at"),
        declined_at=r.get("declined_at"),
        reminder_sent=bool(r.get("reminder_sent") or False),
        reminder_sent_at=r.get("reminder_sent_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLConfirmationRepository(ConfirmationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, activity_id: str, user_id: str) -> Optional[ConfirmationState]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_confirmations c
                WHERE c.activity_id=%s AND c.user_id=%s
                """,
                (activity_id, user_id),
            )
            r = fetchone(cur)
            return _to_state(r) if r else None

    def upsert(self, state: ConfirmationState) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_confirmations(
                    activity_id, user_id, status, notes, confirmed_at, declined_at, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    notes=VALUES(notes),
                    confirmed_at=VALUES(confirmed_at),
                    declined_at=VALUES(declined_at),
                    updated_at=VALUES(updated_at)
                """,
                (
                    state.activity_id,
                    state.user_id,
                    state.status.value,
                    state.notes,
                    state.confirmed_at,
                    state.declined_at,
                    state.created_at,
                    state.updated_at,
                ),
            )

    def mark_reminder_sent(self, *, activity_id: str, user_id: str, sent_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_confirmations(
                    activity_id, user_id, status, reminder_sent, reminder_sent_at, created_at, updated_at
                )
                VALUES(%s,%s,%s,1,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    reminder_sent=1,
                    reminder_sent_at=VALUES(reminder_sent_at),
                    updated_at=VALUES(updated_at)
                """,
                (activity_id, user_id, ConfirmationStatus.PENDING.value, sent_at, sent_at, sent_at),
            )

    def list_for_activity(
        self,
        activity_id: str,
        *,
        status: Optional[ConfirmationStatus] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[ConfirmationState]:
        clauses = ["c.activity_id=%s"]
        params: list[object] = [activity_id]
        if status is not None:
            clauses.append("c.status=%s")
            params.append(status.value)

        page = ""
        if limit is not None:
            page = "LIMIT %s OFFSET %s"
            params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_confirmations c
                WHERE {' AND '.join(clauses)}
                ORDER BY c.created_at ASC, c.user_id ASC
                {page}
                """,
                tuple(params),
            )
            return [_to_state(r) for r in fetchall(cur)]

    def list_for_user(
        self,
        user_id: str,
        *,
        status: Optional[ConfirmationStatus] = None,
        activity_status: Optional[ActivityStatus] = None,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[ConfirmationRow]:
        clauses = ["c.user_id=%s"]
        params: list[object] = [user_id]
        if status is not None:
            clauses.append("c.status=%s")
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

        page = ""
        if limit is not None:
            page = "LIMIT %s OFFSET %s"
            params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS},
                    a.title AS activity_title, a.start_date AS activity_start,
                    a.end_date AS activity_end, a.status AS activity_status
                FROM attendance_confirmations c
                JOIN activities a ON a.activity_id = c.activity_id
                WHERE {' AND '.join(clauses)}
                ORDER BY a.start_date ASC, c.activity_id ASC
                {page}
                """,
                tuple(params),
            )
            return [
                ConfirmationRow(
                    confirmation=_to_state(r),
                    activity_title=r["activity_title"],
                    activity_start=r["activity_start"],
                    activity_end=r["activity_end"],
                    activity_status=ActivityStatus(r["activity_status"]),
                )
                for r in fetchall(cur)
            ]

    def status_map(self, activity_id: str) -> Dict[str, ConfirmationStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, status FROM attendance_confirmations WHERE activity_id=%s",
                (activity_id,),
            )
            return {str(r["user_id"]): ConfirmationStatus(r["status"]) for r in fetchall(cur)}
