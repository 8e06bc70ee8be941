from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UserProfile:
    """Read-only user profile owned by the user directory.

    Note: Only the fields shown next to attendance data are carried here.
    """

    user_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    user_type: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.display_name,
            "user_type": self.user_type,
        }
