"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Time policy values are only defaults; deployments override them through
the settings module (see ``config``).
"""

from .enums import AttendanceStatus

DEFAULT_CHECKIN_OPENS_MINUTES_BEFORE_START = 30
DEFAULT_LATE_GRACE_MINUTES = 15
DEFAULT_EARLY_LEAVE_MINUTES_BEFORE_END = 30

# Statuses that count as "showed up" in every aggregate.
PRESENT_STATUSES = frozenset(
    {
        AttendanceStatus.PRESENT,
        AttendanceStatus.LATE,
        AttendanceStatus.EARLY_LEAVE,
        AttendanceStatus.PARTIAL,
    }
)

DEFAULT_RANKING_LIMIT = 10
DEFAULT_ALERT_DAYS = 30
DEFAULT_MIN_ATTENDANCE_RATE = 70
FREQUENT_LATE_THRESHOLD = 0.30
FREQUENT_EARLY_LEAVE_THRESHOLD = 0.20

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 500
DEFAULT_REPORT_LIST_LIMIT = 10
MAX_REPORT_LIST_LIMIT = 100
