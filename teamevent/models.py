from __future__ import annotations
import datetime as dt
from sqlalchemy import JSON, Boolean, CheckConstraint, Date, Float, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column
from core.database import Base


class TeamEvent(Base):
    __tablename__ = "team_events"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    hours_reduction: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    # removes the whole scheduled day whatever hours_reduction says
    full_day: Mapped[bool] = mapped_column(Boolean, server_default=text("false"), default=False, nullable=False)
    # NULL = every employee
    affected_employee_ids: Mapped[list[int] | None] = mapped_column(JSON, nullable=True)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)

    __table_args__ = (
        CheckConstraint("hours_reduction >= 0", name="ck_team_event_hours_nonneg"),
    )

    @property
    def affects_all(self) -> bool:
        return self.affected_employee_ids is None
