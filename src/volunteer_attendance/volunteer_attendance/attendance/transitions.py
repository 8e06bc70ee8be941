"""Attendance state machine.

Each function takes the current state (activity, existing record, roster
membership) plus one event and returns either the next ``AttendanceRecord`` or
a ``Rejection``. Nothing here touches storage or raises; services turn a
rejection into the matching ``DomainError``.

    (none) --check_in--> PRESENT | LATE --check_out--> same | EARLY_LEAVE
    (none) --mark_absence--> ABSENT | EXCUSED
    (none) --mark_no_show--> NO_SHOW | ABSENT
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from ..activities.model import Activity
from ..core.enums import ActivityStatus, AttendanceStatus, ConfirmationStatus
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    OutOfWindowError,
)
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .schemas import AbsenceData, CheckInData, CheckOutData

CLOSED_ACTIVITY_STATUSES = frozenset({ActivityStatus.CANCELLED, ActivityStatus.COMPLETED})


class RejectionKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    OUT_OF_WINDOW = "OUT_OF_WINDOW"


_ERRORS = {
    RejectionKind.NOT_FOUND: NotFoundError,
    RejectionKind.INVALID_STATE: InvalidStateError,
    RejectionKind.FORBIDDEN: AuthorizationError,
    RejectionKind.CONFLICT: ConflictError,
}


@dataclass(frozen=True)
class Rejection:
    kind: RejectionKind
    message: str
    reason: Optional[str] = None

    def to_error(self) -> DomainError:
        if self.kind == RejectionKind.OUT_OF_WINDOW:
            return OutOfWindowError(self.message, reason=self.reason or OutOfWindowError.TOO_EARLY)
        return _ERRORS[self.kind](self.message)


Outcome = Union[AttendanceRecord, Rejection]


def evaluate_check_in(
    *,
    activity: Optional[Activity],
    is_participant: bool,
    existing: Optional[AttendanceRecord],
    now: datetime,
    factory: AttendanceStrategyFactory,
) -> Optional[Rejection]:
    """Shared by check-in and the eligibility query so both always agree."""

    if activity is None:
        return Rejection(RejectionKind.NOT_FOUND, "Activity not found")
    if activity.status in CLOSED_ACTIVITY_STATUSES:
        return Rejection(
            RejectionKind.INVALID_STATE,
            f"Check-in is not possible for a {activity.status.value.lower()} activity",
        )
    if not is_participant:
        return Rejection(RejectionKind.FORBIDDEN, "User is not a participant of this activity")
    if existing is not None:
        if existing.check_in_time is not None:
            return Rejection(RejectionKind.CONFLICT, "User has already checked in")
        return Rejection(
            RejectionKind.CONFLICT,
            f"Attendance is already recorded as {existing.status.value}",
        )

    reason = factory.policy.window_rejection(activity, now)
    if reason == OutOfWindowError.TOO_EARLY:
        return Rejection(RejectionKind.OUT_OF_WINDOW, "Check-in is not open yet", reason)
    if reason == OutOfWindowError.TOO_LATE:
        return Rejection(RejectionKind.OUT_OF_WINDOW, "Check-in has closed", reason)
    return None


def check_in(
    *,
    activity: Optional[Activity],
    user_id: str,
    is_participant: bool,
    existing: Optional[AttendanceRecord],
    data: CheckInData,
    now: datetime,
    factory: AttendanceStrategyFactory,
) -> Outcome:
    rejection = evaluate_check_in(
        activity=activity,
        is_participant=is_participant,
        existing=existing,
        now=now,
        factory=factory,
    )
    if rejection:
        return rejection

    strategy = factory.for_checkin(now=now, activity=activity)
    decision = strategy.decide_checkin(now=now, activity=activity)
    return AttendanceRecord(
        activity_id=activity.activity_id,
        user_id=user_id,
        status=decision.status,
        check_in_time=now,
        location=data.location,
        latitude=data.latitude,
        longitude=data.longitude,
        device_info=data.device_info,
        notes=data.notes or decision.note,
        created_at=now,
        updated_at=now,
    )


def check_out(
    *,
    activity: Optional[Activity],
    record: Optional[AttendanceRecord],
    data: CheckOutData,
    now: datetime,
    factory: AttendanceStrategyFactory,
) -> Outcome:
    if activity is None:
        return Rejection(RejectionKind.NOT_FOUND, "Activity not found")
    if record is None:
        return Rejection(RejectionKind.NOT_FOUND, "No check-in found for this activity")
    if record.check_in_time is None:
        return Rejection(
            RejectionKind.INVALID_STATE,
            f"Cannot check out: attendance is recorded as {record.status.value}",
        )
    if record.check_out_time is not None:
        return Rejection(RejectionKind.CONFLICT, "User has already checked out")
    if now < record.check_in_time:
        return Rejection(RejectionKind.INVALID_STATE, "Check-out time is before check-in time")

    strategy = factory.for_checkout(now=now, activity=activity)
    decision = strategy.decide_checkout(now=now, activity=activity, current=record.status)
    return replace(
        record,
        check_out_time=now,
        status=decision.status,
        notes=data.notes if data.notes is not None else record.notes,
        updated_at=now,
    )


def mark_absence(
    *,
    activity: Optional[Activity],
    user_id: str,
    is_participant: bool,
    existing: Optional[AttendanceRecord],
    data: AbsenceData,
    now: datetime,
) -> Outcome:
    if activity is None:
        return Rejection(RejectionKind.NOT_FOUND, "Activity not found")
    if not is_participant:
        return Rejection(RejectionKind.FORBIDDEN, "User is not a participant of this activity")
    if existing is not None:
        return Rejection(RejectionKind.CONFLICT, "Attendance is already recorded for this user")

    return AttendanceRecord(
        activity_id=activity.activity_id,
        user_id=user_id,
        status=AttendanceStatus.EXCUSED if data.is_excused else AttendanceStatus.ABSENT,
        notes=data.notes,
        created_at=now,
        updated_at=now,
    )


def evaluate_no_show_sweep(*, activity: Optional[Activity], now: datetime) -> Optional[Rejection]:
    if activity is None:
        return Rejection(RejectionKind.NOT_FOUND, "Activity not found")
    if activity.status == ActivityStatus.CANCELLED:
        return Rejection(RejectionKind.INVALID_STATE, "Activity was cancelled")
    if activity.status != ActivityStatus.COMPLETED and now < activity.end_at:
        return Rejection(RejectionKind.INVALID_STATE, "Activity has not ended yet")
    return None


def mark_no_show(
    *,
    activity: Activity,
    user_id: str,
    existing: Optional[AttendanceRecord],
    confirmation: Optional[ConfirmationStatus],
    now: datetime,
) -> Optional[AttendanceRecord]:
    """Close a participant with no record; None when a record already exists.

    A participant who confirmed and never showed up is a NO_SHOW, anyone
    else without a record is plainly ABSENT.
    """

    if existing is not None:
        return None
    status = AttendanceStatus.NO_SHOW if confirmation == ConfirmationStatus.CONFIRMED else AttendanceStatus.ABSENT
    return AttendanceRecord(
        activity_id=activity.activity_id,
        user_id=user_id,
        status=status,
        created_at=now,
        updated_at=now,
    )
