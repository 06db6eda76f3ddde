from __future__ import annotations
import enum
from datetime import date
from typing import Literal
from pydantic import BaseModel, ConfigDict


class LoadStatus(str, enum.Enum):
    empty = "empty"
    healthy = "healthy"
    warning = "warning"
    overload = "overload"


class BreakdownItem(BaseModel):
    reason: str
    hours: float
    type: Literal["absence", "event"]
    start_date: date
    end_date: date
    model_config = ConfigDict(frozen=True)


class LoadResult(BaseModel):
    hours: float = 0.0
    capacity: float = 0.0
    base_capacity: float = 0.0
    status: LoadStatus = LoadStatus.empty
    percentage: float = 0.0
    breakdown: list[BreakdownItem] = []

    @classmethod
    def empty(cls) -> "LoadResult":
        return cls()


class WeekLoad(BaseModel):
    storage_key: str
    week_start: date
    effective_start: date
    effective_end: date
    label: str
    load: LoadResult


class EmployeeMonthLoad(BaseModel):
    employee_id: int
    display_name: str
    year: int
    month: int
    month_load: LoadResult
    weeks: list[WeekLoad]
