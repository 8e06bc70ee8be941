from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import ActivityStatus, ConfirmationStatus
from .model import ConfirmationRow, ConfirmationState


class ConfirmationRepository(Protocol):
    def get(self, activity_id: str, user_id: str) -> Optional[ConfirmationState]:
        raise NotImplementedError

    def upsert(self, state: ConfirmationState) -> None:
        """Insert or overwrite status, notes and decision timestamps of the pair."""
        raise NotImplementedError

    def mark_reminder_sent(self, *, activity_id: str, user_id: str, sent_at: datetime) -> None:
        """Flag the reminder, creating a PENDING row when the pair has none."""
        raise NotImplementedError

    def list_for_activity(
        self,
        activity_id: str,
        *,
        status: Optional[ConfirmationStatus] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[ConfirmationState]:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: str,
        *,
        status: Optional[ConfirmationStatus] = None,
        activity_status: Optional[ActivityStatus] = None,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[ConfirmationRow]:
        raise NotImplementedError

    def status_map(self, activity_id: str) -> Dict[str, ConfirmationStatus]:
        raise NotImplementedError
