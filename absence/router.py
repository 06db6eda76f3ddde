from __future__ import annotations
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_planner

from .schema import AbsenceSchema, AbsenceCreate, AbsenceUpdate
from . import service

absence_router = APIRouter(prefix="/absences", tags=["Absences"])

# List absences, optional filter by employee and window
@absence_router.get("", response_model=list[AbsenceSchema])
def list_absences(
    employee_id: Optional[int] = Query(None),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
):
    return service.get_absences(
        db,
        employee_id=employee_id,
        overlaps_start=start,
        overlaps_end=end,
    )

# Get single row by id
@absence_router.get("/{absence_id}", response_model=AbsenceSchema)
def get_absence(
    absence_id: int,
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
):
    obj = service.get_absence(db, absence_id)
    if not obj:
        raise HTTPException(status_code=404, detail="absence not found")
    return obj

# Create (planner only)
@absence_router.post("", response_model=AbsenceSchema, status_code=status.HTTP_201_CREATED)
def create_absence(
    payload: AbsenceCreate,
    db: Session = Depends(get_db),
    _planner = Depends(require_planner),
):
    return service.create_absence(db, payload)

# Update (planner only)
@absence_router.patch("/{absence_id}", response_model=AbsenceSchema)
def update_absence(
    absence_id: int,
    payload: AbsenceUpdate,
    db: Session = Depends(get_db),
    _planner = Depends(require_planner),
):
    obj = service.update_absence(db, absence_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="absence not found")
    return obj

# Delete (planner only)
@absence_router.delete("/{absence_id}")
def delete_absence(
    absence_id: int,
    db: Session = Depends(get_db),
    _planner = Depends(require_planner),
):
    if not service.delete_absence(db, absence_id):
        raise HTTPException(status_code=404, detail="absence not found")
    return {"message": "absence deleted"}
