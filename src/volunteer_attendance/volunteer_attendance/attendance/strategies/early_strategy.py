from __future__ import annotations

from datetime import datetime

from ...activities.model import Activity
from ...core.enums import AttendanceStatus
from ...core.exceptions import InvalidStateError
from .base import AttendanceStrategy, StatusDecision


class EarlyLeaveStrategy(AttendanceStrategy):
    """Check-out before the early-leave threshold; overrides PRESENT and LATE alike."""

    def decide_checkin(self, *, now: datetime, activity: Activity) -> StatusDecision:
        raise InvalidStateError("Early leave only applies to check-out")

    def decide_checkout(self, *, now: datetime, activity: Activity, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.EARLY_LEAVE)
