from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ActivityStatus, AttendanceStatus
from .model import AttendanceRecord, AttendanceRow


class AttendanceRepository(Protocol):
    def get(self, activity_id: str, user_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert(self, record: AttendanceRecord) -> Optional[int]:
        """Store a new record; None when (activity, user) already has one."""
        raise NotImplementedError

    def complete_checkout(
        self,
        *,
        record_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> bool:
        """Set the check-out only if the record is checked in and not yet out."""
        raise NotImplementedError

    def count_present(self, activity_id: str) -> int:
        raise NotImplementedError

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
        """Records joined with their activity, newest activity first.

        ``start_at`` / ``end_at`` bound the activity's scheduled start.
        """
        raise NotImplementedError
