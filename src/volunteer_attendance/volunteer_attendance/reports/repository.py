from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ReportType
from .model import AttendanceReport


class ReportRepository(Protocol):
    def save(self, report: AttendanceReport) -> None:
        raise NotImplementedError

    def get(self, report_id: str) -> Optional[AttendanceReport]:
        raise NotImplementedError

    def list_for_activity(
        self,
        activity_id: str,
        *,
        report_type: Optional[ReportType] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Sequence[AttendanceReport]:
        """Newest first."""
        raise NotImplementedError

    def count_for_activity(self, activity_id: str, *, report_type: Optional[ReportType] = None) -> int:
        raise NotImplementedError

    def delete(self, report_id: str) -> bool:
        raise NotImplementedError
