from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class TeamEventSchema(BaseModel):
    id: int
    name: str
    date: dt.date
    hours_reduction: float
    full_day: bool
    affects_all: bool
    affected_employee_ids: Optional[list[int]] = None
    description: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class TeamEventCreate(BaseModel):
    name: str = Field(..., min_length=1)
    date: dt.date
    hours_reduction: float = Field(0.0, ge=0, le=24)
    full_day: bool = False
    affected_employee_ids: Optional[list[int]] = Field(None, description="Omit for all employees")
    description: Optional[str] = None
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_reduction(self):
        if not self.full_day and self.hours_reduction <= 0:
            raise ValueError("hours_reduction must be positive unless full_day is set")
        return self


class TeamEventUpdate(BaseModel):
    name: Optional[str] = None
    date: Optional[dt.date] = None
    hours_reduction: Optional[float] = Field(None, ge=0, le=24)
    full_day: Optional[bool] = None
    affected_employee_ids: Optional[list[int]] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def reject_nulls(self):
        # affected_employee_ids may be cleared to mean everyone
        for name in ("name", "date", "hours_reduction", "full_day"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
