from __future__ import annotations
from datetime import date
from typing import Optional, List

from fastapi import HTTPException
from sqlalchemy import select, and_, func
from sqlalchemy.orm import Session

from .models import Absence
from .schema import AbsenceCreate, AbsenceUpdate
from employee.models import Employee


# -------- helpers --------

def _ensure_employee(db: Session, employee_id: int) -> None:
    if not db.get(Employee, employee_id):
        raise HTTPException(status_code=404, detail="employee not found")


def _validate_window(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise HTTPException(status_code=422, detail="start_date must be on or before end_date")


def _ensure_no_overlap(
    db: Session, employee_id: int, start_date: date, end_date: date, exclude_id: Optional[int] = None
) -> None:
    # overlapping rows would remove the same day twice
    stmt = select(func.count(Absence.id)).where(
        and_(
            Absence.employee_id == employee_id,
            Absence.start_date <= end_date,
            Absence.end_date >= start_date,
        )
    )
    if exclude_id is not None:
        stmt = stmt.where(Absence.id != exclude_id)
    if (db.scalar(stmt) or 0) > 0:
        raise HTTPException(status_code=409, detail="absence overlaps an existing absence")


# -------- queries --------

def get_absence(db: Session, absence_id: int) -> Absence | None:
    return db.get(Absence, absence_id)


def get_absences(
    db: Session,
    *,
    employee_id: Optional[int] = None,
    overlaps_start: Optional[date] = None,
    overlaps_end: Optional[date] = None,
) -> List[Absence]:
    """List absences, optionally for one employee and/or intersecting a window."""
    stmt = select(Absence)
    if employee_id is not None:
        stmt = stmt.where(Absence.employee_id == employee_id)

    if overlaps_start is not None and overlaps_end is not None:
        # inclusive day ranges intersect if start <= e and end >= s
        stmt = stmt.where(and_(Absence.start_date <= overlaps_end, Absence.end_date >= overlaps_start))

    stmt = stmt.order_by(Absence.employee_id, Absence.start_date.asc())
    return list(db.scalars(stmt))


# -------- mutations --------

def create_absence(db: Session, dto: AbsenceCreate) -> Absence:
    _ensure_employee(db, dto.employee_id)
    _validate_window(dto.start_date, dto.end_date)
    _ensure_no_overlap(db, dto.employee_id, dto.start_date, dto.end_date)

    row = Absence(**dto.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_absence(db: Session, absence_id: int, patch: AbsenceUpdate) -> Absence | None:
    row = get_absence(db, absence_id)
    if not row:
        return None

    data = patch.model_dump(exclude_unset=True)
    new_start = data.get("start_date", row.start_date)
    new_end = data.get("end_date", row.end_date)
    _validate_window(new_start, new_end)
    _ensure_no_overlap(db, row.employee_id, new_start, new_end, exclude_id=row.id)

    for k, v in data.items():
        setattr(row, k, v)

    db.commit()
    db.refresh(row)
    return row


def delete_absence(db: Session, absence_id: int) -> bool:
    row = get_absence(db, absence_id)
    if not row:
        return False
    db.delete(row)
    db.commit()
    return True
