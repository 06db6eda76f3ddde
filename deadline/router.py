from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_planner
from editlock.schema import MONTH_PATTERN

from .schema import DeadlineSchema, DeadlineSave, DeadlineVisibility
from . import service

deadline_router = APIRouter(prefix="/deadlines", tags=["Deadlines"])


@deadline_router.get("", response_model=list[DeadlineSchema])
def list_deadlines(
    month: str = Query(..., pattern=MONTH_PATTERN),
    include_hidden: bool = Query(True),
    db: Session = Depends(get_db),
    user=Depends(get_current_active_user),
):
    return service.get_deadlines(db, month=month, include_hidden=include_hidden)


@deadline_router.get("/{deadline_id}", response_model=DeadlineSchema)
def get_deadline(deadline_id: int, db: Session = Depends(get_db), user=Depends(get_current_active_user)):
    obj = service.get_deadline(db, deadline_id)
    if not obj:
        raise HTTPException(status_code=404, detail="deadline not found")
    return obj


# Create or replace the sheet for a project and month
@deadline_router.put("/projects/{project_id}/{month}", response_model=DeadlineSchema)
def save_deadline(
    project_id: int,
    payload: DeadlineSave,
    month: str = Path(..., pattern=MONTH_PATTERN),
    db: Session = Depends(get_db),
    editor_id: int = Depends(require_planner),
):
    return service.save_deadline(db, project_id, month, payload, editor_id=editor_id)


@deadline_router.patch("/{deadline_id}/visibility", response_model=DeadlineSchema)
def set_visibility(
    deadline_id: int,
    payload: DeadlineVisibility,
    db: Session = Depends(get_db),
    _planner=Depends(require_planner),
):
    obj = service.set_hidden(db, deadline_id, payload.is_hidden)
    if not obj:
        raise HTTPException(status_code=404, detail="deadline not found")
    return obj


@deadline_router.delete("/{deadline_id}")
def delete_deadline(deadline_id: int, db: Session = Depends(get_db), editor_id: int = Depends(require_planner)):
    if not service.delete_deadline(db, deadline_id, editor_id=editor_id):
        raise HTTPException(status_code=404, detail="deadline not found")
    return {"message": "deadline deleted"}
