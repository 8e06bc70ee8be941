from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.enums import PeriodGrouping


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def end_of_day(value: date) -> datetime:
    return datetime.combine(value, time.max)


def week_start(value: date) -> date:
    """Sunday on or before ``value``."""
    return value - timedelta(days=(value.weekday() + 1) % 7)


def period_key(value: date, group_by: PeriodGrouping) -> str:
    if group_by == PeriodGrouping.WEEK:
        return week_start(value).isoformat()
    if group_by == PeriodGrouping.MONTH:
        return f"{value.year:04d}-{value.month:02d}"
    return value.isoformat()


def isoformat_or_none(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
