from __future__ import annotations
import logging
from typing import Optional, List

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from editlock import service as lock_service
from project.models import Project
from .models import Deadline
from .schema import DeadlineSave

_logger = logging.getLogger(__name__)


def _warn_if_locked_by_other(db: Session, project_id: int, month: str, editor_id: int) -> None:
    # locks are advisory; the last save wins even against a live holder
    lock = lock_service.get_live_lock(db, project_id, month)
    if lock is not None and lock.employee_id != editor_id:
        _logger.warning(
            "deadline %s/%s written by employee %s while locked by %s",
            project_id, month, editor_id, lock.holder_name or lock.employee_id,
        )


def get_deadline(db: Session, deadline_id: int) -> Deadline | None:
    return db.get(Deadline, deadline_id)


def get_deadline_for(db: Session, project_id: int, month: str) -> Deadline | None:
    stmt = select(Deadline).where(Deadline.project_id == project_id, Deadline.month == month)
    return db.scalars(stmt).first()


def get_deadlines(db: Session, *, month: str, include_hidden: bool = True) -> List[Deadline]:
    stmt = select(Deadline).where(Deadline.month == month)
    if not include_hidden:
        stmt = stmt.where(Deadline.is_hidden.is_(False))
    stmt = stmt.order_by(Deadline.project_id)
    return list(db.scalars(stmt))


def save_deadline(db: Session, project_id: int, month: str, dto: DeadlineSave, *, editor_id: int) -> Deadline:
    """Create or replace the sheet for (project, month)."""
    if not db.get(Project, project_id):
        raise HTTPException(status_code=404, detail="project not found")
    _warn_if_locked_by_other(db, project_id, month, editor_id)

    hours = {str(k): v for k, v in dto.employee_hours.items()}
    row = get_deadline_for(db, project_id, month)
    if row is None:
        row = Deadline(project_id=project_id, month=month)
        db.add(row)
    row.notes = dto.notes
    row.employee_hours = hours
    row.is_hidden = dto.is_hidden
    row.updated_by = editor_id
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="deadline was created concurrently; reload and retry")
    db.refresh(row)
    return row


def set_hidden(db: Session, deadline_id: int, is_hidden: bool) -> Deadline | None:
    row = db.get(Deadline, deadline_id)
    if not row:
        return None
    row.is_hidden = is_hidden
    db.commit()
    db.refresh(row)
    return row


def delete_deadline(db: Session, deadline_id: int, *, editor_id: Optional[int] = None) -> bool:
    row = db.get(Deadline, deadline_id)
    if not row:
        return False
    if editor_id is not None:
        _warn_if_locked_by_other(db, row.project_id, row.month, editor_id)
    db.delete(row)
    db.commit()
    return True
