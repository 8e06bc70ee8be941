"""Time policy: the only place that knows the check-in window and thresholds.

Given an activity's scheduled start ``S`` and end ``E``:

- the check-in window opens ``opens_minutes_before_start`` before ``S`` and
  closes at ``E`` (both bounds inclusive);
- a check-in later than ``S + late_grace_minutes`` is LATE;
- a check-out earlier than ``E - early_leave_minutes_before_end`` is an
  EARLY_LEAVE.

Everything here is pure so services and tests can share it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional

from ..activities.model import Activity
from ..core.constants import (
    DEFAULT_CHECKIN_OPENS_MINUTES_BEFORE_START,
    DEFAULT_EARLY_LEAVE_MINUTES_BEFORE_END,
    DEFAULT_LATE_GRACE_MINUTES,
)
from ..core.exceptions import OutOfWindowError, ValidationError


@dataclass(frozen=True)
class TimePolicy:
    opens_minutes_before_start: int = DEFAULT_CHECKIN_OPENS_MINUTES_BEFORE_START
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    early_leave_minutes_before_end: int = DEFAULT_EARLY_LEAVE_MINUTES_BEFORE_END

    def __post_init__(self):
        for name in ("opens_minutes_before_start", "late_grace_minutes", "early_leave_minutes_before_end"):
            if int(getattr(self, name)) < 0:
                raise ValidationError(f"{name} must not be negative")

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]] = None) -> "TimePolicy":
        config = config or {}
        return cls(
            opens_minutes_before_start=int(
                config.get("CHECKIN_OPENS_MINUTES_BEFORE_START", DEFAULT_CHECKIN_OPENS_MINUTES_BEFORE_START)
            ),
            late_grace_minutes=int(config.get("LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
            early_leave_minutes_before_end=int(
                config.get("EARLY_LEAVE_MINUTES_BEFORE_END", DEFAULT_EARLY_LEAVE_MINUTES_BEFORE_END)
            ),
        )

    def opens_at(self, activity: Activity) -> datetime:
        return activity.start_at - timedelta(minutes=self.opens_minutes_before_start)

    def late_after(self, activity: Activity) -> datetime:
        return activity.start_at + timedelta(minutes=self.late_grace_minutes)

    def early_leave_before(self, activity: Activity) -> datetime:
        return activity.end_at - timedelta(minutes=self.early_leave_minutes_before_end)

    def window_rejection(self, activity: Activity, now: datetime) -> Optional[str]:
        """Return "too early" / "too late" when ``now`` is outside the window."""

        if now < self.opens_at(activity):
            return OutOfWindowError.TOO_EARLY
        if now > activity.end_at:
            return OutOfWindowError.TOO_LATE
        return None

    def is_late(self, activity: Activity, now: datetime) -> bool:
        return now > self.late_after(activity)

    def is_early_leave(self, activity: Activity, now: datetime) -> bool:
        return now < self.early_leave_before(activity)

    def to_dict(self) -> dict:
        return {
            "checkin_opens_minutes_before_start": self.opens_minutes_before_start,
            "late_grace_minutes": self.late_grace_minutes,
            "early_leave_minutes_before_end": self.early_leave_minutes_before_end,
        }
