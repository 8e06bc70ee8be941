from __future__ import annotations

from datetime import datetime

from ...activities.model import Activity
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in, normal check-out."""

    def decide_checkin(self, *, now: datetime, activity: Activity) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, now: datetime, activity: Activity, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
