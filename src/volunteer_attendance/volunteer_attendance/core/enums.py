from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles supplied by the identity layer."""

    VOLUNTEER = "VOLUNTEER"
    ORGANIZER = "ORGANIZER"
    ADMIN = "ADMIN"


class ActivityStatus(str, Enum):
    """Lifecycle of an activity, owned by the activity directory."""

    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ConfirmationStatus(str, Enum):
    """RSVP state of a participant before the activity happens."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    DECLINED = "DECLINED"
    MAYBE = "MAYBE"


class AttendanceStatus(str, Enum):
    """Normalized attendance outcome stored on each record."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    EARLY_LEAVE = "EARLY_LEAVE"
    PARTIAL = "PARTIAL"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSED"
    NO_SHOW = "NO_SHOW"


class ReportType(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    ACTIVITY_SUMMARY = "ACTIVITY_SUMMARY"
    PARTICIPANT_SUMMARY = "PARTICIPANT_SUMMARY"
    CUSTOM = "CUSTOM"


class PeriodGrouping(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class ReportGrouping(str, Enum):
    """Dimensions accepted by custom reports."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    USER = "user"


class AlertType(str, Enum):
    LOW_ATTENDANCE = "LOW_ATTENDANCE"
    FREQUENT_LATE = "FREQUENT_LATE"
    FREQUENT_EARLY_LEAVE = "FREQUENT_EARLY_LEAVE"


class AlertSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
