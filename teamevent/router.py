from __future__ import annotations
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_planner

from .schema import TeamEventSchema, TeamEventCreate, TeamEventUpdate
from . import service

team_event_router = APIRouter(prefix="/team-events", tags=["Team events"])


@team_event_router.get("", response_model=list[TeamEventSchema])
def list_team_events(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    employee_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user=Depends(get_current_active_user),
):
    return service.get_team_events(db, start=start, end=end, employee_id=employee_id)


@team_event_router.get("/{event_id}", response_model=TeamEventSchema)
def get_team_event(event_id: int, db: Session = Depends(get_db), user=Depends(get_current_active_user)):
    obj = service.get_team_event(db, event_id)
    if not obj:
        raise HTTPException(status_code=404, detail="team event not found")
    return obj


@team_event_router.post("", response_model=TeamEventSchema, status_code=status.HTTP_201_CREATED)
def create_team_event(
    payload: TeamEventCreate,
    db: Session = Depends(get_db),
    _planner=Depends(require_planner),
):
    return service.create_team_event(db, payload)


@team_event_router.patch("/{event_id}", response_model=TeamEventSchema)
def update_team_event(
    event_id: int,
    payload: TeamEventUpdate,
    db: Session = Depends(get_db),
    _planner=Depends(require_planner),
):
    obj = service.update_team_event(db, event_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="team event not found")
    return obj


@team_event_router.delete("/{event_id}")
def delete_team_event(event_id: int, db: Session = Depends(get_db), _planner=Depends(require_planner)):
    if not service.delete_team_event(db, event_id):
        raise HTTPException(status_code=404, detail="team event not found")
    return {"message": "team event deleted"}
