from __future__ import annotations
from datetime import datetime
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from core.database import Base


class Deadline(Base):
    __tablename__ = "deadlines"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), index=True)
    month: Mapped[str] = mapped_column(String(7), nullable=False, index=True)  # YYYY-MM
    notes: Mapped[str | None] = mapped_column(Text(), nullable=True)
    # {"<employee_id>": hours}
    employee_hours: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    is_hidden: Mapped[bool] = mapped_column(Boolean, server_default=text("false"), default=False, nullable=False)

    updated_by: Mapped[int | None] = mapped_column(ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("project_id", "month", name="uq_deadline_project_month"),
    )

    @property
    def total_hours(self) -> float:
        return sum(float(h or 0) for h in (self.employee_hours or {}).values())
