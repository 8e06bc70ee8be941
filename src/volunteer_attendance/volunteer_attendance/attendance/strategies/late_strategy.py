from __future__ import annotations

from datetime import datetime

from ...activities.model import Activity
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Check-in after the grace period."""

    def decide_checkin(self, *, now: datetime, activity: Activity) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE)

    def decide_checkout(self, *, now: datetime, activity: Activity, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
