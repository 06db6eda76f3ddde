from __future__ import annotations
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user

from .schema import EmployeeMonthLoad, LoadResult, WeekLoad
from . import service

capacity_router = APIRouter(prefix="/capacity", tags=["Capacity"])


@capacity_router.get("/employees/{employee_id}/weeks/{week_key}", response_model=LoadResult)
def week_load(
    employee_id: int,
    week_key: date,
    effective_start: Optional[date] = Query(None),
    effective_end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    user=Depends(get_current_active_user),
):
    if (effective_start is None) != (effective_end is None):
        raise HTTPException(status_code=422, detail="effective_start and effective_end go together")
    if effective_start is not None and effective_start > effective_end:
        raise HTTPException(status_code=422, detail="effective_start must be on or before effective_end")
    return service.week_load(db, employee_id, week_key, effective_start, effective_end)


@capacity_router.get("/employees/{employee_id}/months/{year}/{month}", response_model=LoadResult)
def month_load(
    employee_id: int,
    year: int,
    month: int = Path(..., ge=1, le=12),
    db: Session = Depends(get_db),
    user=Depends(get_current_active_user),
):
    return service.month_load(db, employee_id, year, month)


@capacity_router.get("/employees/{employee_id}/months/{year}/{month}/weeks", response_model=list[WeekLoad])
def month_week_loads(
    employee_id: int,
    year: int,
    month: int = Path(..., ge=1, le=12),
    db: Session = Depends(get_db),
    user=Depends(get_current_active_user),
):
    return service.month_week_loads(db, employee_id, year, month)


@capacity_router.get("/months/{year}/{month}", response_model=list[EmployeeMonthLoad])
def team_month_overview(
    year: int,
    month: int = Path(..., ge=1, le=12),
    db: Session = Depends(get_db),
    user=Depends(get_current_active_user),
):
    return service.team_month_overview(db, year, month)
