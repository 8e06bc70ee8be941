from dataclasses import replace
from datetime import datetime

from src.volunteer_attendance.volunteer_attendance.activities.model import Activity
from src.volunteer_attendance.volunteer_attendance.attendance import transitions
from src.volunteer_attendance.volunteer_attendance.attendance.factory import AttendanceStrategyFactory
from src.volunteer_attendance.volunteer_attendance.attendance.model import AttendanceRecord
from src.volunteer_attendance.volunteer_attendance.attendance.schemas import AbsenceData, CheckInData, CheckOutData
from src.volunteer_attendance.volunteer_attendance.core.enums import ActivityStatus, AttendanceStatus, ConfirmationStatus
from src.volunteer_attendance.volunteer_attendance.core.exceptions import InvalidStateError, OutOfWindowError
from src.volunteer_attendance.volunteer_attendance.attendance.transitions import Rejection, RejectionKind

ACTIVITY = Activity(
    activity_id="a",
    title="Shelter shift",
    start_at=datetime(2025, 3, 1, 10, 0),
    end_at=datetime(2025, 3, 1, 12, 0),
    status=ActivityStatus.SCHEDULED,
)
FACTORY = AttendanceStrategyFactory()


def _check_in(now, *, activity=ACTIVITY, is_participant=True, existing=None):
    return transitions.check_in(
        activity=activity,
        user_id="u1",
        is_participant=is_participant,
        existing=existing,
        data=CheckInData(location="Main hall"),
        now=now,
        factory=FACTORY,
    )


def test_check_in_returns_record_and_never_raises():
    record = _check_in(datetime(2025, 3, 1, 10, 5))

    assert isinstance(record, AttendanceRecord)
    assert record.status == AttendanceStatus.PRESENT
    assert record.check_in_time == datetime(2025, 3, 1, 10, 5)
    assert record.location == "Main hall"


def test_check_in_rejections_follow_evaluation_order():
    cancelled = replace(ACTIVITY, status=ActivityStatus.CANCELLED)
    too_early = datetime(2025, 3, 1, 8, 0)

    assert _check_in(too_early, activity=None).kind == RejectionKind.NOT_FOUND
    assert _check_in(too_early, activity=cancelled, is_participant=False).kind == RejectionKind.INVALID_STATE
    assert _check_in(too_early, is_participant=False).kind == RejectionKind.FORBIDDEN
    absent = AttendanceRecord(activity_id="a", user_id="u1", status=AttendanceStatus.ABSENT)
    assert _check_in(too_early, existing=absent).kind == RejectionKind.CONFLICT
    assert _check_in(too_early).kind == RejectionKind.OUT_OF_WINDOW


def test_out_of_window_rejection_maps_to_error_with_reason():
    rejection = _check_in(datetime(2025, 3, 1, 12, 1))
    error = rejection.to_error()

    assert isinstance(error, OutOfWindowError)
    assert error.reason == "too late"
    assert error.status_code == 422


def test_check_out_before_check_in_is_invalid():
    record = _check_in(datetime(2025, 3, 1, 10, 30))
    outcome = transitions.check_out(
        activity=ACTIVITY,
        record=record,
        data=CheckOutData(),
        now=datetime(2025, 3, 1, 10, 29),
        factory=FACTORY,
    )

    assert isinstance(outcome, Rejection)
    assert isinstance(outcome.to_error(), InvalidStateError)


def test_check_out_keeps_notes_unless_given():
    record = _check_in(datetime(2025, 3, 1, 10, 0))
    record = replace(record, notes="bring gloves")

    kept = transitions.check_out(
        activity=ACTIVITY, record=record, data=CheckOutData(), now=datetime(2025, 3, 1, 11, 50), factory=FACTORY
    )
    replaced = transitions.check_out(
        activity=ACTIVITY,
        record=record,
        data=CheckOutData(notes="left via back door"),
        now=datetime(2025, 3, 1, 11, 50),
        factory=FACTORY,
    )

    assert kept.notes == "bring gloves"
    assert replaced.notes == "left via back door"


def test_absence_without_timestamps():
    outcome = transitions.mark_absence(
        activity=ACTIVITY,
        user_id="u1",
        is_participant=True,
        existing=None,
        data=AbsenceData(is_excused=True),
        now=datetime(2025, 3, 1, 9, 0),
    )

    assert outcome.status == AttendanceStatus.EXCUSED
    assert outcome.check_in_time is None
    assert outcome.check_out_time is None


def test_no_show_depends_on_confirmation():
    now = datetime(2025, 3, 1, 13, 0)
    confirmed = transitions.mark_no_show(
        activity=ACTIVITY, user_id="u1", existing=None, confirmation=ConfirmationStatus.CONFIRMED, now=now
    )
    unanswered = transitions.mark_no_show(activity=ACTIVITY, user_id="u2", existing=None, confirmation=None, now=now)

    assert confirmed.status == AttendanceStatus.NO_SHOW
    assert unanswered.status == AttendanceStatus.ABSENT
    assert transitions.mark_no_show(
        activity=ACTIVITY, user_id="u1", existing=confirmed, confirmation=None, now=now
    ) is None


def test_no_show_sweep_waits_for_end():
    assert transitions.evaluate_no_show_sweep(activity=ACTIVITY, now=datetime(2025, 3, 1, 11, 0)).kind == (
        RejectionKind.INVALID_STATE
    )
    assert transitions.evaluate_no_show_sweep(activity=ACTIVITY, now=datetime(2025, 3, 1, 12, 0)) is None
