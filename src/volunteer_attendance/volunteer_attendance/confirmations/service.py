from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional

from ..activities.directory import ActivityDirectory
from ..activities.model import Activity
from ..common.datetime_utils import now_local
from ..common.validators import optional_text
from ..core.enums import ConfirmationStatus
from ..core.exceptions import AuthorizationError, NotFoundError
from ..frequency.stats import percent
from ..users.directory import UserDirectory
from .dispatcher import LoggingReminderDispatcher, ReminderDispatcher
from .model import ConfirmationState, ReminderResult
from .repository import ConfirmationRepository
from .schemas import ActivityConfirmationFilters, UserConfirmationFilters

logger = logging.getLogger(__name__)


class ConfirmationService:
    """RSVP register: one upserted state per (activity, participant)."""

    def __init__(
        self,
        confirmations: ConfirmationRepository,
        activities: ActivityDirectory,
        *,
        users: UserDirectory | None = None,
        dispatcher: ReminderDispatcher | None = None,
    ):
        self._confirmations = confirmations
        self._activities = activities
        self._users = users
        self._dispatcher = dispatcher or LoggingReminderDispatcher()

    def _require_activity(self, activity_id: str) -> Activity:
        activity = self._activities.get_activity(activity_id)
        if not activity:
            raise NotFoundError("Activity not found")
        return activity

    def set_confirmation(
        self,
        activity_id: str,
        user_id: str,
        status: ConfirmationStatus,
        notes: Optional[str] = None,
        *,
        now: datetime | None = None,
    ) -> ConfirmationState:
        now = now or now_local()
        self._require_activity(activity_id)
        if not self._activities.is_participant(activity_id, user_id):
            raise AuthorizationError("User is not a participant of this activity")

        current = self._confirmations.get(activity_id, user_id) or ConfirmationState(
            activity_id=activity_id,
            user_id=user_id,
            created_at=now,
        )
        state = replace(
            current,
            status=status,
            notes=current.notes if notes is None else optional_text(notes, "notes"),
            confirmed_at=now if status == ConfirmationStatus.CONFIRMED else current.confirmed_at,
            declined_at=now if status == ConfirmationStatus.DECLINED else current.declined_at,
            updated_at=now,
        )
        self._confirmations.upsert(state)
        logger.info("Confirmation %s for user %s on activity %s", status.value, user_id, activity_id)
        return state

    def confirm(self, activity_id: str, user_id: str, notes: Optional[str] = None, *, now: datetime | None = None):
        return self.set_confirmation(activity_id, user_id, ConfirmationStatus.CONFIRMED, notes, now=now)

    def decline(self, activity_id: str, user_id: str, notes: Optional[str] = None, *, now: datetime | None = None):
        return self.set_confirmation(activity_id, user_id, ConfirmationStatus.DECLINED, notes, now=now)

    def maybe(self, activity_id: str, user_id: str, notes: Optional[str] = None, *, now: datetime | None = None):
        return self.set_confirmation(activity_id, user_id, ConfirmationStatus.MAYBE, notes, now=now)

    def list_for_activity(self, activity_id: str, filters: ActivityConfirmationFilters) -> List[dict]:
        self._require_activity(activity_id)
        states = self._confirmations.list_for_activity(
            activity_id,
            status=filters.status,
            limit=filters.limit,
            offset=filters.offset,
        )
        data = [s.to_dict() for s in states]
        if filters.include_user_details and self._users:
            profiles = self._users.get_profiles(s.user_id for s in states)
            for item, state in zip(data, states):
                profile = profiles.get(state.user_id)
                item["user"] = profile.to_dict() if profile else None
        return data

    def list_for_user(self, user_id: str, filters: UserConfirmationFilters) -> List[dict]:
        rows = self._confirmations.list_for_user(
            user_id,
            status=filters.status,
            activity_status=filters.activity_status,
            start_at=filters.start_at,
            end_at=filters.end_at,
            limit=filters.limit,
            offset=filters.offset,
        )
        return [r.to_dict(include_activity=filters.include_activity_details) for r in rows]

    def _reminder_targets(self, activity_id: str, user_ids: Optional[Iterable[str]]) -> List[str]:
        """Roster members still PENDING (or without an RSVP), narrowed to ``user_ids`` when given."""

        participants = self._activities.list_participants(activity_id)
        if user_ids is not None:
            wanted = set(str(u) for u in user_ids)
            participants = [uid for uid in participants if uid in wanted]

        statuses = self._confirmations.status_map(activity_id)
        return [
            uid
            for uid in participants
            if statuses.get(uid, ConfirmationStatus.PENDING) == ConfirmationStatus.PENDING
        ]

    def send_reminders(
        self,
        activity_id: str,
        user_ids: Optional[Iterable[str]] = None,
        *,
        now: datetime | None = None,
    ) -> ReminderResult:
        """Deliver reminders one by one; a failed delivery never aborts the batch."""

        now = now or now_local()
        activity = self._require_activity(activity_id)

        results = []
        sent = failed = 0
        for uid in self._reminder_targets(activity_id, user_ids):
            try:
                self._dispatcher.send_reminder(activity=activity, user_id=uid)
            except Exception as e:
                failed += 1
                logger.warning("Reminder to user %s for activity %s failed: %s", uid, activity_id, e, exc_info=True)
                results.append({"user_id": uid, "success": False, "error": str(e)})
                continue

            self._confirmations.mark_reminder_sent(activity_id=activity_id, user_id=uid, sent_at=now)
            sent += 1
            results.append({"user_id": uid, "success": True})

        logger.info("Reminders for activity %s: %d sent, %d failed", activity_id, sent, failed)
        return ReminderResult(total_sent=sent, total_failed=failed, results=results)

    def confirmation_stats(self, activity_id: str) -> dict:
        self._require_activity(activity_id)
        states = self._confirmations.list_for_activity(activity_id)
        counts = Counter(s.status for s in states)
        total = len(states)
        confirmed = counts.get(ConfirmationStatus.CONFIRMED, 0)
        return {
            "total": total,
            "confirmed": confirmed,
            "pending": counts.get(ConfirmationStatus.PENDING, 0),
            "declined": counts.get(ConfirmationStatus.DECLINED, 0),
            "maybe": counts.get(ConfirmationStatus.MAYBE, 0),
            "confirmation_rate": percent(confirmed, total),
            "by_status": {s.value: counts.get(s, 0) for s in ConfirmationStatus},
        }
