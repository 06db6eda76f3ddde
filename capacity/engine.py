"""Workload and capacity computation.

For an employee and a window (a week bucket or a calendar month) the engine
produces the committed hours, the effective capacity after absences and team
events, the load percentage and a status. Everything is computed from the
``Snapshot`` handed in; the engine keeps no other state.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from .absences import absence_details, absence_hours
from .events import team_event_details, team_event_hours
from .periods import (
    DateLike,
    as_date,
    key_in_month,
    month_bounds,
    monthly_capacity,
    round2,
    week_end,
    week_start,
    weeks_for_month,
    working_hours_in_range,
)
from .records import EmployeeRecord, Snapshot
from .schema import BreakdownItem, EmployeeMonthLoad, LoadResult, LoadStatus, WeekLoad

_logger = logging.getLogger(__name__)

HEALTHY_MAX_PCT = 85.0
WARNING_MAX_PCT = 100.0
# shown when hours are committed against zero capacity
INFINITE_LOAD_PCT = 999.0


def load_percentage(committed: float, capacity: float) -> float:
    if capacity <= 0:
        return INFINITE_LOAD_PCT if committed > 0 else 0.0
    return round2(committed / capacity * 100)


def classify(committed: float, capacity: float, percentage: float) -> LoadStatus:
    if committed == 0:
        return LoadStatus.empty
    if capacity == 0:
        return LoadStatus.overload
    if percentage <= HEALTHY_MAX_PCT:
        return LoadStatus.healthy
    if percentage <= WARNING_MAX_PCT:
        return LoadStatus.warning
    return LoadStatus.overload


class CapacityEngine:
    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    # ---------- committed hours ----------

    def committed_hours(self, employee_id: int, keys: Iterable[str]) -> float:
        wanted = set(keys)
        return round2(sum(
            a.effective_hours for a in self.snapshot.allocations.values()
            if a.employee_id == employee_id and a.week_start_date in wanted
        ))

    # ---------- reductions ----------

    def _reduce(
        self,
        employee: EmployeeRecord,
        base: float,
        start: date,
        end: date,
    ) -> tuple[float, list[BreakdownItem]]:
        absences = self.snapshot.absences_for(employee.id)
        events = list(self.snapshot.team_events.values())
        breakdown: list[BreakdownItem] = []

        capacity = max(0.0, round2(base))

        lost = absence_hours(start, end, absences, employee.schedule)
        capacity = max(0.0, round2(capacity - lost))
        for d in absence_details(start, end, absences, employee.schedule):
            breakdown.append(BreakdownItem(
                reason=f"{d.label} ({d.start_date.isoformat()} to {d.end_date.isoformat()})",
                hours=d.hours,
                type="absence",
                start_date=d.start_date,
                end_date=d.end_date,
            ))

        lost = team_event_hours(start, end, employee.id, events, employee.schedule, absences)
        capacity = max(0.0, round2(capacity - lost))
        for d in team_event_details(start, end, employee.id, events, employee.schedule, absences):
            breakdown.append(BreakdownItem(
                reason=f"{d.name} ({d.date.isoformat()})",
                hours=d.hours,
                type="event",
                start_date=d.date,
                end_date=d.date,
            ))

        return capacity, breakdown

    def _result(self, committed: float, base: float, capacity: float, breakdown: list[BreakdownItem]) -> LoadResult:
        percentage = load_percentage(committed, capacity)
        return LoadResult(
            hours=committed,
            capacity=capacity,
            base_capacity=round2(base),
            status=classify(committed, capacity, percentage),
            percentage=percentage,
            breakdown=breakdown,
        )

    # ---------- public operations ----------

    def load_for_week(
        self,
        employee_id: int,
        week_start_key: DateLike,
        effective_start: Optional[DateLike] = None,
        effective_end: Optional[DateLike] = None,
    ) -> LoadResult:
        """Load of one week bucket.

        When ``effective_start``/``effective_end`` are given (a week clipped by
        a month boundary) capacity comes from the schedule over that sub-range;
        otherwise the employee's flat weekly capacity is used.
        """
        employee = self.snapshot.employees.get(employee_id)
        if employee is None:
            _logger.debug("load_for_week: employee %s not found", employee_id)
            return LoadResult.empty()

        key = as_date(week_start_key).isoformat()
        committed = self.committed_hours(employee_id, [key])

        if effective_start is not None and effective_end is not None:
            start, end = as_date(effective_start), as_date(effective_end)
            base = working_hours_in_range(start, end, employee.schedule)
        else:
            start = week_start(as_date(key))
            end = week_end(start)
            base = employee.default_weekly_capacity

        capacity, breakdown = self._reduce(employee, base, start, end)
        return self._result(committed, base, capacity, breakdown)

    def load_for_month(self, employee_id: int, year: int, month: int) -> LoadResult:
        employee = self.snapshot.employees.get(employee_id)
        if employee is None:
            _logger.debug("load_for_month: employee %s not found", employee_id)
            return LoadResult.empty()

        keys = [b.storage_key for b in weeks_for_month(year, month) if key_in_month(b.storage_key, year, month)]
        committed = self.committed_hours(employee_id, keys)

        first, last = month_bounds(year, month)
        base = monthly_capacity(year, month, employee.schedule)
        capacity, breakdown = self._reduce(employee, base, first, last)
        return self._result(committed, base, capacity, breakdown)

    # ---------- aggregates ----------

    def week_loads_for_month(self, employee_id: int, year: int, month: int) -> list[WeekLoad]:
        return [
            WeekLoad(
                storage_key=b.storage_key,
                week_start=b.week_start,
                effective_start=b.effective_start,
                effective_end=b.effective_end,
                label=b.label,
                load=self.load_for_week(employee_id, b.storage_key, b.effective_start, b.effective_end),
            )
            for b in weeks_for_month(year, month)
        ]

    def team_month_overview(self, year: int, month: int) -> list[EmployeeMonthLoad]:
        employees = sorted(
            (e for e in self.snapshot.employees.values() if e.is_active),
            key=lambda e: e.name.lower(),
        )
        return [
            EmployeeMonthLoad(
                employee_id=e.id,
                display_name=e.name,
                year=year,
                month=month,
                month_load=self.load_for_month(e.id, year, month),
                weeks=self.week_loads_for_month(e.id, year, month),
            )
            for e in employees
        ]
