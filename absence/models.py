from __future__ import annotations
import enum
from datetime import date
from sqlalchemy import CheckConstraint, Date, Enum as SAEnum, Float, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column
from core.database import Base


class AbsenceType(str, enum.Enum):
    vacation = "vacation"
    sick = "sick"
    personal = "personal"
    other = "other"


class Absence(Base):
    __tablename__ = "absences"

    id: Mapped[int] = mapped_column(primary_key=True)
    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), index=True
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date:   Mapped[date] = mapped_column(Date, nullable=False)  # inclusive
    type: Mapped[AbsenceType] = mapped_column(SAEnum(AbsenceType, name="absence_type"), nullable=False)
    # 0 = full day(s); otherwise hours removed per scheduled day
    hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    description: Mapped[str | None] = mapped_column(String(255))

    __table_args__ = (
        Index("ix_absence_emp_start", "employee_id", "start_date"),
        CheckConstraint("end_date >= start_date", name="ck_absence_window"),
        CheckConstraint("hours BETWEEN 0 AND 24", name="ck_absence_hours"),
    )
