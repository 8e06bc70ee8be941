from __future__ import annotations

from typing import Dict, Iterable, Protocol

from .model import UserProfile


class UserDirectory(Protocol):
    def get_profiles(self, user_ids: Iterable[str]) -> Dict[str, UserProfile]:
        raise NotImplementedError
