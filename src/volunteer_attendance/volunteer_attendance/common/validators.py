from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def optional_text(value: Optional[str], field_name: str, max_len: int = 1000) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    if len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value
