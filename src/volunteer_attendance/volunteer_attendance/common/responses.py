from __future__ import annotations

from typing import Any, Optional, Sequence

from flask import jsonify

from ..core.exceptions import DomainError, OutOfWindowError, ValidationError


def success(data: Any = None, message: Optional[str] = None, status: int = 200):
    body: dict = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return jsonify(body), status


def failure(message: str, status: int, errors: Optional[Sequence[dict]] = None):
    body: dict = {"success": False, "message": message}
    if errors:
        body["errors"] = list(errors)
    return jsonify(body), status


def domain_failure(error: DomainError):
    errors = None
    if isinstance(error, ValidationError):
        errors = error.errors
    elif isinstance(error, OutOfWindowError):
        errors = [{"field": "now", "message": error.reason}]
    return failure(error.message or error.__class__.__name__, error.status_code, errors)
