from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_planner

from .models import ProjectStatus
from .schema import ProjectSchema, ProjectCreate, ProjectUpdate, ProjectMonthHours
from . import service

project_router = APIRouter(prefix="/projects", tags=["Projects"])


@project_router.get("", response_model=list[ProjectSchema])
def list_projects(
    status: Optional[ProjectStatus] = Query(None),
    db: Session = Depends(get_db),
    user=Depends(get_current_active_user),
):
    return service.get_projects(db, status=status)


@project_router.get("/{project_id}", response_model=ProjectSchema)
def get_project(project_id: int, db: Session = Depends(get_db), user=Depends(get_current_active_user)):
    obj = service.get_project(db, project_id)
    if not obj:
        raise HTTPException(status_code=404, detail="project not found")
    return obj


@project_router.get("/{project_id}/months/{year}/{month}", response_model=ProjectMonthHours)
def project_month_hours(
    project_id: int,
    year: int,
    month: int = Path(..., ge=1, le=12),
    db: Session = Depends(get_db),
    user=Depends(get_current_active_user),
):
    obj = service.get_project(db, project_id)
    if not obj:
        raise HTTPException(status_code=404, detail="project not found")
    return service.project_hours_for_month(db, obj, year, month)


@project_router.post("", response_model=ProjectSchema, status_code=status.HTTP_201_CREATED)
def create_project(payload: ProjectCreate, db: Session = Depends(get_db), _planner=Depends(require_planner)):
    return service.create_project(db, payload)


@project_router.patch("/{project_id}", response_model=ProjectSchema)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    _planner=Depends(require_planner),
):
    obj = service.update_project(db, project_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="project not found")
    return obj


@project_router.delete("/{project_id}")
def delete_project(project_id: int, db: Session = Depends(get_db), _planner=Depends(require_planner)):
    if not service.delete_project(db, project_id):
        raise HTTPException(status_code=404, detail="project not found")
    return {"message": "project deleted"}
