from __future__ import annotations
from datetime import date
from typing import Optional, List

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from employee.models import Employee
from .models import TeamEvent
from .schema import TeamEventCreate, TeamEventUpdate


def _ensure_employees(db: Session, ids: Optional[list[int]]) -> None:
    if not ids:
        return
    found = set(db.scalars(select(Employee.id).where(Employee.id.in_(ids))))
    missing = sorted(set(ids) - found)
    if missing:
        raise HTTPException(status_code=404, detail=f"unknown employees: {missing}")


def get_team_event(db: Session, event_id: int) -> TeamEvent | None:
    return db.get(TeamEvent, event_id)


def get_team_events(
    db: Session,
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    employee_id: Optional[int] = None,
) -> List[TeamEvent]:
    stmt = select(TeamEvent)
    if start is not None:
        stmt = stmt.where(TeamEvent.date >= start)
    if end is not None:
        stmt = stmt.where(TeamEvent.date <= end)
    stmt = stmt.order_by(TeamEvent.date, TeamEvent.id)
    rows = list(db.scalars(stmt))
    if employee_id is not None:
        # JSON membership is filtered here to stay portable across backends
        rows = [r for r in rows if r.affects_all or employee_id in r.affected_employee_ids]
    return rows


def create_team_event(db: Session, dto: TeamEventCreate) -> TeamEvent:
    _ensure_employees(db, dto.affected_employee_ids)
    data = dto.model_dump()
    # an empty list means nobody, which is never what the planner intends
    if not data["affected_employee_ids"]:
        data["affected_employee_ids"] = None
    row = TeamEvent(**data)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_team_event(db: Session, event_id: int, patch: TeamEventUpdate) -> TeamEvent | None:
    row = db.get(TeamEvent, event_id)
    if not row:
        return None
    data = patch.model_dump(exclude_unset=True)
    if "affected_employee_ids" in data:
        _ensure_employees(db, data["affected_employee_ids"])
        data["affected_employee_ids"] = data["affected_employee_ids"] or None
    for k, v in data.items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row


def delete_team_event(db: Session, event_id: int) -> bool:
    row = db.get(TeamEvent, event_id)
    if not row:
        return False
    db.delete(row)
    db.commit()
    return True
