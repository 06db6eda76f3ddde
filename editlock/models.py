from __future__ import annotations
from datetime import datetime
from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from core.database import Base


class EditLock(Base):
    __tablename__ = "edit_locks"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), index=True)
    month: Mapped[str] = mapped_column(String(7), nullable=False, index=True)  # YYYY-MM
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"), index=True)
    locked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    employee = relationship("Employee", lazy="joined")

    # one row per (project, month): a second acquirer overwrites it
    __table_args__ = (
        UniqueConstraint("project_id", "month", name="uq_edit_lock_project_month"),
    )

    @property
    def holder_name(self) -> str | None:
        return self.employee.display_name if self.employee is not None else None
