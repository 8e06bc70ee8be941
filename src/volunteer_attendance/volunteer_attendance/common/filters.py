"""Shared pieces for the query/filter models of each feature.

Every query operation takes an explicit pydantic model; unknown fields are
rejected so a typo in a query string fails loudly instead of being ignored.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as SchemaValidationError

from ..core.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from ..core.exceptions import ValidationError
from .datetime_utils import end_of_day, start_of_day

F = TypeVar("F", bound=BaseModel)


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class DateRangeFilter(StrictModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self

    @property
    def start_at(self) -> Optional[datetime]:
        return start_of_day(self.start_date) if self.start_date else None

    @property
    def end_at(self) -> Optional[datetime]:
        return end_of_day(self.end_date) if self.end_date else None


class PageFilter(StrictModel):
    limit: int = Field(default=DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT)
    offset: int = Field(default=0, ge=0)


def parse_filters(model: Type[F], payload: Optional[Mapping[str, Any]] = None) -> F:
    """Validate a raw mapping (query args or JSON body) into ``model``.

    Raises the domain ``ValidationError`` so callers never see pydantic types.
    """

    try:
        return model.model_validate(dict(payload or {}))
    except SchemaValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())) or None,
                "message": err.get("msg", "invalid value"),
            }
            for err in e.errors()
        ]
        raise ValidationError("Invalid parameters", errors=errors) from e
