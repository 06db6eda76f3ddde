from __future__ import annotations
from datetime import date
from typing import Annotated, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from capacity.periods import is_storage_key
from .models import AllocationStatus


def _check_week_key(v: date) -> date:
    if not is_storage_key(v):
        raise ValueError("week_start_date must be a Monday or the first day of a month")
    return v


WeekKey = Annotated[date, AfterValidator(_check_week_key)]


class AllocationSchema(BaseModel):
    id: int
    employee_id: int
    project_id: int
    week_start_date: date
    hours_assigned: float
    hours_actual: Optional[float] = None
    hours_computed: Optional[float] = None
    status: AllocationStatus
    description: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class AllocationCreate(BaseModel):
    employee_id: int
    project_id: int
    week_start_date: WeekKey
    hours_assigned: float = Field(..., ge=0)
    hours_actual: Optional[float] = Field(None, ge=0)
    hours_computed: Optional[float] = Field(None, ge=0)
    status: AllocationStatus = AllocationStatus.planned
    description: Optional[str] = None
    model_config = ConfigDict(extra="forbid")


class AllocationUpdate(BaseModel):
    week_start_date: Optional[WeekKey] = None
    hours_assigned: Optional[float] = Field(None, ge=0)
    hours_actual: Optional[float] = Field(None, ge=0)
    hours_computed: Optional[float] = Field(None, ge=0)
    status: Optional[AllocationStatus] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in ("week_start_date", "hours_assigned", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
