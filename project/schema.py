from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from .models import ProjectStatus


class ProjectSchema(BaseModel):
    id: int
    client_name: str
    name: str
    status: ProjectStatus
    budget_hours: float
    minimum_hours: float
    model_config = ConfigDict(from_attributes=True)


class ProjectCreate(BaseModel):
    client_name: str
    name: str
    status: ProjectStatus = ProjectStatus.active
    budget_hours: float = Field(0.0, ge=0)
    minimum_hours: float = Field(0.0, ge=0)
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_floor(self):
        if self.budget_hours and self.minimum_hours > self.budget_hours:
            raise ValueError("minimum hours cannot exceed budget hours")
        return self


class ProjectUpdate(BaseModel):
    client_name: Optional[str] = None
    name: Optional[str] = None
    status: Optional[ProjectStatus] = None
    budget_hours: Optional[float] = Field(None, ge=0)
    minimum_hours: Optional[float] = Field(None, ge=0)


class ProjectMonthHours(BaseModel):
    project_id: int
    year: int
    month: int
    used: float
    budget: float
    minimum: float
    percentage: float
