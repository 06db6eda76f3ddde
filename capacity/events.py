from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator

from .periods import DateLike, WorkSchedule, as_date, round2
from .records import AbsenceRecord, TeamEventRecord


@dataclass(frozen=True)
class TeamEventDetail:
    event_id: int
    name: str
    date: date
    hours: float


def _contributions(
    start: date,
    end: date,
    employee_id: int,
    events: Iterable[TeamEventRecord],
    schedule: WorkSchedule,
    employee_absences: list[AbsenceRecord],
) -> Iterator[tuple[TeamEventRecord, float]]:
    for evt in events:
        if not (start <= evt.date <= end) or not evt.affects(employee_id):
            continue
        # the absence already removed this day
        if any(a.employee_id == employee_id and a.covers(evt.date) for a in employee_absences):
            continue
        scheduled = schedule.hours_on(evt.date)
        if scheduled <= 0:
            continue
        hours = scheduled if evt.full_day else min(evt.hours_reduction, scheduled)
        if hours > 0:
            yield evt, hours


def team_event_hours(
    range_start: DateLike,
    range_end: DateLike,
    employee_id: int,
    events: Iterable[TeamEventRecord],
    schedule: WorkSchedule,
    employee_absences: Iterable[AbsenceRecord] = (),
) -> float:
    """Capacity hours an employee loses to team events in the range."""
    start, end = as_date(range_start), as_date(range_end)
    absences = list(employee_absences)
    return round2(sum(h for _, h in _contributions(start, end, employee_id, events, schedule, absences)))


def team_event_details(
    range_start: DateLike,
    range_end: DateLike,
    employee_id: int,
    events: Iterable[TeamEventRecord],
    schedule: WorkSchedule,
    employee_absences: Iterable[AbsenceRecord] = (),
) -> list[TeamEventDetail]:
    start, end = as_date(range_start), as_date(range_end)
    absences = list(employee_absences)
    ordered = sorted(events, key=lambda e: (e.date, e.id))
    return [
        TeamEventDetail(evt.id, evt.name, evt.date, round2(hours))
        for evt, hours in _contributions(start, end, employee_id, ordered, schedule, absences)
    ]
