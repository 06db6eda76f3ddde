from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from editlock.schema import MONTH_PATTERN


class DeadlineSchema(BaseModel):
    id: int
    project_id: int
    month: str
    notes: Optional[str] = None
    employee_hours: dict[int, float]
    is_hidden: bool
    total_hours: float
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class DeadlineSave(BaseModel):
    """Full sheet for one project and month; replaces what is stored."""
    notes: Optional[str] = None
    employee_hours: dict[int, float] = Field(default_factory=dict)
    is_hidden: bool = False
    model_config = ConfigDict(extra="forbid")

    @field_validator("employee_hours")
    @classmethod
    def non_negative(cls, v: dict[int, float]) -> dict[int, float]:
        if any(h < 0 for h in v.values()):
            raise ValueError("hours cannot be negative")
        # zero rows are dropped
        return {k: h for k, h in v.items() if h > 0}


class DeadlineVisibility(BaseModel):
    is_hidden: bool
