from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_planner

from .schema import EditLockSchema, LockRequest, LockStatus, MONTH_PATTERN
from . import service

lock_router = APIRouter(prefix="/locks", tags=["Edit locks"])


# Live locks, for "being edited by" badges
@lock_router.get("", response_model=list[EditLockSchema])
def list_locks(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    db: Session = Depends(get_db),
    user=Depends(get_current_active_user),
):
    return service.get_live_locks(db, month=month)


# Acquire; contention is reported in the body, not as an error
@lock_router.post("", response_model=LockStatus)
def acquire_lock(
    payload: LockRequest,
    db: Session = Depends(get_db),
    employee_id: int = Depends(require_planner),
):
    return service.acquire_lock(db, payload.project_id, payload.month, employee_id)


@lock_router.put("/{project_id}/{month}", response_model=LockStatus)
def renew_lock(
    project_id: int,
    month: str = Path(..., pattern=MONTH_PATTERN),
    db: Session = Depends(get_db),
    employee_id: int = Depends(require_planner),
):
    return service.renew_lock(db, project_id, month, employee_id)


@lock_router.delete("/{project_id}/{month}")
def release_lock(
    project_id: int,
    month: str = Path(..., pattern=MONTH_PATTERN),
    db: Session = Depends(get_db),
    employee_id: int = Depends(require_planner),
):
    released = service.release_lock(db, project_id, month, employee_id)
    return {"released": released}
