from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..activities.model import Activity
from .policy import TimePolicy
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on the time policy."""

    policy: TimePolicy = field(default_factory=TimePolicy)

    def for_checkin(self, *, now: datetime, activity: Activity) -> AttendanceStrategy:
        if self.policy.is_late(activity, now):
            return LateStrategy()
        return NormalStrategy()

    def for_checkout(self, *, now: datetime, activity: Activity) -> AttendanceStrategy:
        if self.policy.is_early_leave(activity, now):
            return EarlyLeaveStrategy()
        return NormalStrategy()
