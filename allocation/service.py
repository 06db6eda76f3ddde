from __future__ import annotations
from datetime import date
from typing import Optional, List

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from capacity.periods import month_bounds
from employee.models import Employee
from project.models import Project
from .models import Allocation
from .schema import AllocationCreate, AllocationUpdate


# -------- helpers --------

def _ensure_refs(db: Session, employee_id: int, project_id: int) -> None:
    if not db.get(Employee, employee_id):
        raise HTTPException(status_code=404, detail="employee not found")
    if not db.get(Project, project_id):
        raise HTTPException(status_code=404, detail="project not found")


# -------- queries --------

def get_allocation(db: Session, allocation_id: int) -> Allocation | None:
    return db.get(Allocation, allocation_id)


def get_allocations(
    db: Session,
    *,
    employee_id: Optional[int] = None,
    project_id: Optional[int] = None,
    week_start_date: Optional[date] = None,
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> List[Allocation]:
    stmt = select(Allocation)
    if employee_id is not None:
        stmt = stmt.where(Allocation.employee_id == employee_id)
    if project_id is not None:
        stmt = stmt.where(Allocation.project_id == project_id)
    if week_start_date is not None:
        stmt = stmt.where(Allocation.week_start_date == week_start_date)
    if year is not None and month is not None:
        first, last = month_bounds(year, month)
        stmt = stmt.where(Allocation.week_start_date >= first, Allocation.week_start_date <= last)
    stmt = stmt.order_by(Allocation.week_start_date, Allocation.employee_id, Allocation.id)
    return list(db.scalars(stmt))


# -------- mutations --------

def create_allocation(db: Session, dto: AllocationCreate) -> Allocation:
    _ensure_refs(db, dto.employee_id, dto.project_id)
    row = Allocation(**dto.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_allocation(db: Session, allocation_id: int, patch: AllocationUpdate) -> Allocation | None:
    row = db.get(Allocation, allocation_id)
    if not row:
        return None
    data = patch.model_dump(exclude_unset=True)
    for k, v in data.items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row


def delete_allocation(db: Session, allocation_id: int) -> bool:
    row = db.get(Allocation, allocation_id)
    if not row:
        return False
    db.delete(row)
    db.commit()
    return True
