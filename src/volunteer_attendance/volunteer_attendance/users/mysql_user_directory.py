from __future__ import annotations

from typing import Dict, Iterable

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .directory import UserDirectory
from .model import UserProfile


class MySQLUserDirectory(UserDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_profiles(self, user_ids: Iterable[str]) -> Dict[str, UserProfile]:
        ids = sorted({str(u) for u in user_ids})
        if not ids:
            return {}

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, email, display_name, user_type
                FROM users
                WHERE user_id IN ({in_clause(ids)})
                """,
                tuple(ids),
            )
            rows = fetchall(cur)
            return {
                str(r["user_id"]): UserProfile(
                    user_id=str(r["user_id"]),
                    email=r.get("email"),
                    display_name=r.get("display_name"),
                    user_type=r.get("user_type"),
                )
                for r in rows
            }
