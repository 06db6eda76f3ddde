from __future__ import annotations
from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .models import AbsenceType


class AbsenceSchema(BaseModel):
    id: int
    employee_id: int
    start_date: date
    end_date: date
    type: AbsenceType
    hours: float
    description: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class AbsenceCreate(BaseModel):
    employee_id: int
    start_date: date = Field(..., description="First absent day")
    end_date: date = Field(..., description="Last absent day, inclusive")
    type: AbsenceType = AbsenceType.vacation
    hours: float = Field(0.0, ge=0, le=24, description="0 for full days, otherwise hours per day")
    description: Optional[str] = None
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_window(self):
        if self.start_date > self.end_date:
            raise ValueError("start date must be on or before end date")
        return self


class AbsenceUpdate(BaseModel):
    start_date: Optional[date] = None
    end_date:   Optional[date] = None
    type:       Optional[AbsenceType] = None
    hours:      Optional[float] = Field(None, ge=0, le=24)
    description: Optional[str] = None

    @model_validator(mode="after")
    def validate_partial_window(self):
        for name in ("start_date", "end_date", "type", "hours"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        # Only validate if both ends provided
        if self.start_date is not None and self.end_date is not None:
            if self.start_date > self.end_date:
                raise ValueError("start date must be on or before end date")
        return self
