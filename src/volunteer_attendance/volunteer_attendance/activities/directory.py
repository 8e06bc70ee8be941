from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Activity


class ActivityDirectory(Protocol):
    """Port to the external activity directory.

    The engine reads timing, status and roster membership, and pushes back the
    number of participants currently marked present. It never edits content.
    """

    def get_activity(self, activity_id: str) -> Optional[Activity]:
        raise NotImplementedError

    def is_participant(self, activity_id: str, user_id: str) -> bool:
        raise NotImplementedError

    def list_participants(self, activity_id: str) -> Sequence[str]:
        raise NotImplementedError

    def update_present_count(self, activity_id: str, count: int) -> None:
        raise NotImplementedError
