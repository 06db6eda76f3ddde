from __future__ import annotations
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from allocation.models import Allocation
from capacity.engine import load_percentage
from capacity.periods import month_bounds, round2
from capacity.records import AllocationRecord
from .models import Project, ProjectStatus
from .schema import ProjectCreate, ProjectUpdate, ProjectMonthHours


def get_project(db: Session, project_id: int) -> Project | None:
    return db.get(Project, project_id)


def get_projects(db: Session, *, status: Optional[ProjectStatus] = None) -> List[Project]:
    stmt = select(Project)
    if status is not None:
        stmt = stmt.where(Project.status == status)
    stmt = stmt.order_by(Project.client_name.asc(), Project.name.asc())
    return list(db.scalars(stmt))


def create_project(db: Session, dto: ProjectCreate) -> Project:
    row = Project(**dto.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_project(db: Session, project_id: int, patch: ProjectUpdate) -> Project | None:
    row = db.get(Project, project_id)
    if not row:
        return None
    for k, v in patch.model_dump(exclude_unset=True).items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row


def delete_project(db: Session, project_id: int) -> bool:
    row = db.get(Project, project_id)
    if not row:
        return False
    db.delete(row)
    db.commit()
    return True


def project_hours_for_month(db: Session, project: Project, year: int, month: int) -> ProjectMonthHours:
    """Hours committed to a project in a month against its budget."""
    first, last = month_bounds(year, month)
    rows = db.scalars(
        select(Allocation).where(
            Allocation.project_id == project.id,
            Allocation.week_start_date >= first,
            Allocation.week_start_date <= last,
        )
    )
    used = round2(sum(AllocationRecord.from_obj(r).effective_hours for r in rows))
    budget = project.budget_hours or 0.0
    return ProjectMonthHours(
        project_id=project.id,
        year=year,
        month=month,
        used=used,
        budget=budget,
        minimum=project.minimum_hours or 0.0,
        percentage=load_percentage(used, budget) if budget > 0 else 0.0,
    )
