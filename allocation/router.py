from __future__ import annotations
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_planner

from .schema import AllocationSchema, AllocationCreate, AllocationUpdate
from . import service

allocation_router = APIRouter(prefix="/allocations", tags=["Allocations"])


@allocation_router.get("", response_model=list[AllocationSchema])
def list_allocations(
    employee_id: Optional[int] = Query(None),
    project_id: Optional[int] = Query(None),
    week_start_date: Optional[date] = Query(None),
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
    user=Depends(get_current_active_user),
):
    return service.get_allocations(
        db,
        employee_id=employee_id,
        project_id=project_id,
        week_start_date=week_start_date,
        year=year,
        month=month,
    )


@allocation_router.get("/{allocation_id}", response_model=AllocationSchema)
def get_allocation(allocation_id: int, db: Session = Depends(get_db), user=Depends(get_current_active_user)):
    obj = service.get_allocation(db, allocation_id)
    if not obj:
        raise HTTPException(status_code=404, detail="allocation not found")
    return obj


@allocation_router.post("", response_model=AllocationSchema, status_code=status.HTTP_201_CREATED)
def create_allocation(
    payload: AllocationCreate,
    db: Session = Depends(get_db),
    _planner=Depends(require_planner),
):
    return service.create_allocation(db, payload)


@allocation_router.patch("/{allocation_id}", response_model=AllocationSchema)
def update_allocation(
    allocation_id: int,
    payload: AllocationUpdate,
    db: Session = Depends(get_db),
    _planner=Depends(require_planner),
):
    obj = service.update_allocation(db, allocation_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="allocation not found")
    return obj


@allocation_router.delete("/{allocation_id}")
def delete_allocation(allocation_id: int, db: Session = Depends(get_db), _planner=Depends(require_planner)):
    if not service.delete_allocation(db, allocation_id):
        raise HTTPException(status_code=404, detail="allocation not found")
    return {"message": "allocation deleted"}
