from __future__ import annotations
from sqlalchemy import Boolean, CheckConstraint, Float, String, text
from sqlalchemy.orm import Mapped, mapped_column
from core.database import Base

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(primary_key=True)
    display_name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    role: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # hours owed per weekday
    monday: Mapped[float] = mapped_column(Float, nullable=False, default=8.0)
    tuesday: Mapped[float] = mapped_column(Float, nullable=False, default=8.0)
    wednesday: Mapped[float] = mapped_column(Float, nullable=False, default=8.0)
    thursday: Mapped[float] = mapped_column(Float, nullable=False, default=8.0)
    friday: Mapped[float] = mapped_column(Float, nullable=False, default=8.0)
    saturday: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    sunday: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    is_active: Mapped[bool] = mapped_column(Boolean, server_default=text("true"), default=True, nullable=False)
    # planners may edit allocations, absences, events and deadlines
    is_planner: Mapped[bool] = mapped_column(Boolean, server_default=text("false"), default=False, nullable=False)

    __table_args__ = tuple(
        CheckConstraint(f"{day} BETWEEN 0 AND 24", name=f"ck_employee_{day}_hours") for day in WEEKDAYS
    )

    @property
    def default_weekly_capacity(self) -> float:
        return sum(getattr(self, day) or 0.0 for day in WEEKDAYS)
