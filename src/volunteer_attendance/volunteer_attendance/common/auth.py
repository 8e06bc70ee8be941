"""Session-based access checks shared by the controllers.

The upstream login stores ``user_id`` and ``role`` in the Flask session; the
engine trusts them as given.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Mapping

from flask import request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .responses import failure

PRIVILEGED_ROLES = frozenset({Role.ORGANIZER.value, Role.ADMIN.value})


def current_user_id() -> str:
    return str(session["user_id"])


def current_role() -> str:
    return str(session.get("role") or Role.VOLUNTEER.value)


def is_admin() -> bool:
    return current_role() == Role.ADMIN.value


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return failure("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper


def organizer_required(view):
    """Allow ORGANIZER and ADMIN roles only."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return failure("Authentication required", 401)
        if current_role() not in PRIVILEGED_ROLES:
            return failure("Organizer or admin role required", 403)
        return view(*args, **kwargs)

    return wrapper


def require_self_or_admin(user_id: str) -> None:
    if user_id != current_user_id() and not is_admin():
        raise AuthorizationError("You can only access your own data")


def query_args() -> Mapping[str, Any]:
    return request.args.to_dict()


def json_body() -> Mapping[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}
