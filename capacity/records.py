from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Union

from .periods import WorkSchedule, as_date

AllEmployees = "all"


def _get(src: Any, name: str, default: Any = None) -> Any:
    if isinstance(src, Mapping):
        return src.get(name, default)
    return getattr(src, name, default)


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


@dataclass(frozen=True)
class EmployeeRecord:
    id: int
    name: str
    schedule: WorkSchedule
    is_active: bool = True

    @property
    def default_weekly_capacity(self) -> float:
        return self.schedule.weekly_total

    @classmethod
    def from_obj(cls, src: Any) -> "EmployeeRecord":
        schedule = WorkSchedule.from_mapping(src) if isinstance(src, Mapping) else WorkSchedule.from_obj(src)
        return cls(
            id=_get(src, "id"),
            name=_get(src, "display_name", ""),
            schedule=schedule,
            is_active=bool(_get(src, "is_active", True)),
        )


@dataclass(frozen=True)
class AllocationRecord:
    id: int
    employee_id: int
    project_id: int
    week_start_date: str
    hours_assigned: float
    hours_actual: Optional[float] = None
    hours_computed: Optional[float] = None
    status: str = "planned"

    @property
    def effective_hours(self) -> float:
        """Actual hours once completed and reported, planned hours otherwise."""
        if self.status == "completed" and (self.hours_actual or 0) > 0:
            return float(self.hours_actual)
        return float(self.hours_assigned or 0.0)

    @classmethod
    def from_obj(cls, src: Any) -> "AllocationRecord":
        week = _get(src, "week_start_date")
        return cls(
            id=_get(src, "id"),
            employee_id=_get(src, "employee_id"),
            project_id=_get(src, "project_id"),
            week_start_date=week.isoformat() if isinstance(week, date) else str(week)[:10],
            hours_assigned=float(_get(src, "hours_assigned", 0.0) or 0.0),
            hours_actual=_get(src, "hours_actual"),
            hours_computed=_get(src, "hours_computed"),
            status=_enum_value(_get(src, "status", "planned")),
        )


@dataclass(frozen=True)
class AbsenceRecord:
    id: int
    employee_id: int
    start_date: date
    end_date: date
    type: str = "vacation"
    # 0 = full working day(s); > 0 = hours removed per scheduled day
    hours: float = 0.0

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @classmethod
    def from_obj(cls, src: Any) -> "AbsenceRecord":
        return cls(
            id=_get(src, "id"),
            employee_id=_get(src, "employee_id"),
            start_date=as_date(_get(src, "start_date")),
            end_date=as_date(_get(src, "end_date")),
            type=_enum_value(_get(src, "type", "vacation")),
            hours=float(_get(src, "hours", 0.0) or 0.0),
        )


@dataclass(frozen=True)
class TeamEventRecord:
    id: int
    name: str
    date: date
    hours_reduction: float
    affected_employee_ids: Union[str, frozenset[int]] = AllEmployees
    full_day: bool = False

    def affects(self, employee_id: int) -> bool:
        if self.affected_employee_ids == AllEmployees:
            return True
        return employee_id in self.affected_employee_ids

    @classmethod
    def from_obj(cls, src: Any) -> "TeamEventRecord":
        ids = _get(src, "affected_employee_ids")
        return cls(
            id=_get(src, "id"),
            name=_get(src, "name", ""),
            date=as_date(_get(src, "date")),
            hours_reduction=float(_get(src, "hours_reduction", 0.0) or 0.0),
            affected_employee_ids=AllEmployees if ids in (None, AllEmployees) else frozenset(ids),
            full_day=bool(_get(src, "full_day", False)),
        )


@dataclass
class Snapshot:
    """Plain collections the engine reads from."""
    employees: dict[int, EmployeeRecord] = field(default_factory=dict)
    allocations: dict[int, AllocationRecord] = field(default_factory=dict)
    absences: dict[int, AbsenceRecord] = field(default_factory=dict)
    team_events: dict[int, TeamEventRecord] = field(default_factory=dict)

    def absences_for(self, employee_id: int) -> list[AbsenceRecord]:
        return [a for a in self.absences.values() if a.employee_id == employee_id]
