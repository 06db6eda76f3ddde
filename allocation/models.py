from __future__ import annotations
import enum
from datetime import date
from sqlalchemy import CheckConstraint, Date, Enum as SAEnum, Float, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from core.database import Base


class AllocationStatus(str, enum.Enum):
    planned = "planned"
    active = "active"
    completed = "completed"


class Allocation(Base):
    __tablename__ = "allocations"

    id: Mapped[int] = mapped_column(primary_key=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"), index=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), index=True)

    # week bucket storage key: a Monday, or the 1st of a month for a clipped week
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)

    hours_assigned: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    hours_actual: Mapped[float | None] = mapped_column(Float, nullable=True)
    hours_computed: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[AllocationStatus] = mapped_column(
        SAEnum(AllocationStatus, name="allocation_status"), nullable=False, default=AllocationStatus.planned
    )
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)

    employee = relationship("Employee")
    project = relationship("Project")

    __table_args__ = (
        CheckConstraint("hours_assigned >= 0", name="ck_allocation_assigned_nonneg"),
        Index("ix_allocation_emp_week", "employee_id", "week_start_date"),
    )
