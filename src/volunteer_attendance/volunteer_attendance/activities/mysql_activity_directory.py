from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ActivityStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .directory import ActivityDirectory
from .model import Activity


class MySQLActivityDirectory(ActivityDirectory):
    """Activity directory backed by the platform's ``activities`` tables."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_activity(self, activity_id: str) -> Optional[Activity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT activity_id, title, description, start_date, end_date, status,
                       created_by, address, city, state, is_online, meeting_url
                FROM activities
                WHERE activity_id=%s
                """,
                (activity_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Activity(
                activity_id=str(r["activity_id"]),
                title=r["title"],
                start_at=r["start_date"],
                end_at=r["end_date"],
                status=ActivityStatus(r["status"]),
                created_by=r.get("created_by"),
                description=r.get("description"),
                address=r.get("address"),
                city=r.get("city"),
                state=r.get("state"),
                is_online=bool(r.get("is_online") or False),
                meeting_url=r.get("meeting_url"),
            )

    def is_participant(self, activity_id: str, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM activity_participants WHERE activity_id=%s AND user_id=%s",
                (activity_id, user_id),
            )
            return fetchone(cur) is not None

    def list_participants(self, activity_id: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id FROM activity_participants WHERE activity_id=%s ORDER BY user_id",
                (activity_id,),
            )
            return [str(r["user_id"]) for r in fetchall(cur)]

    def update_present_count(self, activity_id: str, count: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE activities SET current_participants=%s WHERE activity_id=%s",
                (int(count), activity_id),
            )
