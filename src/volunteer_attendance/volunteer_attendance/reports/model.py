from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from ..core.enums import ReportType


@dataclass(frozen=True)
class AttendanceReport:
    """Immutable snapshot of a generated report. Only its generator may delete it."""

    report_id: str
    activity_id: str
    generated_by: str
    report_type: ReportType
    generated_at: datetime
    filters: Dict[str, Any] = field(default_factory=dict)
    content: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self, *, include_content: bool = True) -> dict:
        data = {
            "id": self.report_id,
            "activity_id": self.activity_id,
            "generated_by": self.generated_by,
            "report_type": self.report_type.value,
            "filters": self.filters,
            "generated_at": self.generated_at.isoformat(),
        }
        if include_content:
            data["content"] = self.content
        return data
