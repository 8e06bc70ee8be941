"""Pure aggregation of attendance statuses into rates."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import asdict, dataclass
from fractions import Fraction
from typing import Dict, Iterable

from ..core.constants import PRESENT_STATUSES
from ..core.enums import AttendanceStatus


def percent(numerator: int, denominator: int) -> int:
    """Integer percentage rounded half-up; 0 when the denominator is 0."""

    if denominator <= 0:
        return 0
    return (numerator * 200 + denominator) // (2 * denominator)


@dataclass(frozen=True)
class AttendanceStats:
    total: int = 0
    present_count: int = 0
    late_count: int = 0
    early_leave_count: int = 0
    partial_count: int = 0
    absent_count: int = 0
    excused_count: int = 0
    no_show_count: int = 0
    attendance_rate: int = 0
    punctuality_rate: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def status_breakdown(statuses: Iterable[AttendanceStatus]) -> Dict[str, int]:
    counts = Counter(statuses)
    return {s.value: counts.get(s, 0) for s in AttendanceStatus}


def compute_stats(statuses: Iterable[AttendanceStatus]) -> AttendanceStats:
    counts = Counter(statuses)
    total = sum(counts.values())
    present = sum(counts.get(s, 0) for s in PRESENT_STATUSES)
    late = counts.get(AttendanceStatus.LATE, 0)
    return AttendanceStats(
        total=total,
        present_count=present,
        late_count=late,
        early_leave_count=counts.get(AttendanceStatus.EARLY_LEAVE, 0),
        partial_count=counts.get(AttendanceStatus.PARTIAL, 0),
        absent_count=counts.get(AttendanceStatus.ABSENT, 0),
        excused_count=counts.get(AttendanceStatus.EXCUSED, 0),
        no_show_count=counts.get(AttendanceStatus.NO_SHOW, 0),
        attendance_rate=percent(present, total),
        # Early leavers stay in the numerator: only late arrivals count against punctuality.
        punctuality_rate=percent(present - late, present),
    )


def average_rate(stats: Iterable[AttendanceStats]) -> int:
    """Mean of the exact per-user attendance ratios, rounded half-up once."""

    ratios = [Fraction(s.present_count, s.total) for s in stats if s.total]
    if not ratios:
        return 0
    return math.floor(sum(ratios) * 100 / len(ratios) + Fraction(1, 2))
