from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class EditLockSchema(BaseModel):
    project_id: int
    month: str
    employee_id: int
    holder_name: Optional[str] = None
    locked_at: datetime
    expires_at: datetime
    model_config = ConfigDict(from_attributes=True)


class LockRequest(BaseModel):
    project_id: int
    month: str = Field(..., pattern=MONTH_PATTERN, description="YYYY-MM")
    model_config = ConfigDict(extra="forbid")


class LockStatus(BaseModel):
    project_id: int
    month: str
    acquired: bool
    holder_id: Optional[int] = None
    holder_name: Optional[str] = None
    expires_at: Optional[datetime] = None
    # the store could not be reached; editing proceeds without a lock
    fail_open: bool = False

    @computed_field
    @property
    def message(self) -> str:
        if self.acquired:
            return "lock held"
        return f"being edited by {self.holder_name or 'another planner'}"
