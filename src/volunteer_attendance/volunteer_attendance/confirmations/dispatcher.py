from __future__ import annotations

import logging
from typing import Protocol

from ..activities.model import Activity

logger = logging.getLogger(__name__)


class ReminderDispatcher(Protocol):
    """Port to the notification transport. Raise to report a failed delivery."""

    def send_reminder(self, *, activity: Activity, user_id: str) -> None:
        raise NotImplementedError


class LoggingReminderDispatcher(ReminderDispatcher):
    """Default dispatcher: records the reminder in the application log only."""

    def send_reminder(self, *, activity: Activity, user_id: str) -> None:
        logger.info(
            "Reminder: user %s please confirm attendance for %r on %s",
            user_id,
            activity.title,
            activity.start_at.isoformat(),
        )
