from __future__ import annotations
import enum
from sqlalchemy import Enum as SAEnum, Float, String, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from core.database import Base


class ProjectStatus(str, enum.Enum):
    active = "active"
    archived = "archived"


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[ProjectStatus] = mapped_column(
        SAEnum(ProjectStatus, name="project_status"), nullable=False, default=ProjectStatus.active
    )

    # monthly contracted hours (ceiling) and committed minimum (floor)
    budget_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    minimum_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    __table_args__ = (
        CheckConstraint("budget_hours >= 0", name="ck_project_budget_nonneg"),
        CheckConstraint("minimum_hours >= 0", name="ck_project_minimum_nonneg"),
    )
