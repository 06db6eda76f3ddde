from __future__ import annotations
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from .context import SchedulingContext
from .engine import CapacityEngine
from .periods import as_date, month_bounds, week_end, week_start
from .schema import EmployeeMonthLoad, LoadResult, WeekLoad


def _engine_for(db: Session, start: date, end: date) -> CapacityEngine:
    # widen to whole weeks so unclipped week loads see every day they cover
    return SchedulingContext.from_session(db, start=week_start(start), end=week_end(week_start(end))).engine()


def week_load(
    db: Session,
    employee_id: int,
    week_key: date,
    effective_start: Optional[date] = None,
    effective_end: Optional[date] = None,
) -> LoadResult:
    key = as_date(week_key)
    start, end = week_start(key), week_end(week_start(key))
    if effective_start is not None and effective_end is not None:
        start, end = min(start, effective_start), max(end, effective_end)
    engine = _engine_for(db, start, end)
    return engine.load_for_week(employee_id, key, effective_start, effective_end)


def month_load(db: Session, employee_id: int, year: int, month: int) -> LoadResult:
    first, last = month_bounds(year, month)
    return _engine_for(db, first, last).load_for_month(employee_id, year, month)


def month_week_loads(db: Session, employee_id: int, year: int, month: int) -> list[WeekLoad]:
    first, last = month_bounds(year, month)
    return _engine_for(db, first, last).week_loads_for_month(employee_id, year, month)


def team_month_overview(db: Session, year: int, month: int) -> list[EmployeeMonthLoad]:
    first, last = month_bounds(year, month)
    return _engine_for(db, first, last).team_month_overview(year, month)
