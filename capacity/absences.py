from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from .periods import DateLike, WorkSchedule, as_date, days_in_range, round2
from .records import AbsenceRecord

# a partial-day absence never removes more than this per day
PARTIAL_DAY_MAX_HOURS = 24.0

ABSENCE_TYPE_LABELS = {
    "vacation": "Vacation",
    "sick": "Sick leave",
    "personal": "Personal",
    "other": "Other",
}


@dataclass(frozen=True)
class AbsenceDetail:
    absence_id: int
    type: str
    start_date: date
    end_date: date
    hours: float

    @property
    def label(self) -> str:
        return ABSENCE_TYPE_LABELS.get(self.type, self.type)


def _clip(absence: AbsenceRecord, start: date, end: date) -> tuple[date, date] | None:
    lo = max(absence.start_date, start)
    hi = min(absence.end_date, end)
    if lo > hi:
        return None
    return lo, hi


def _hours_for(absence: AbsenceRecord, start: date, end: date, schedule: WorkSchedule) -> float:
    window = _clip(absence, start, end)
    if window is None:
        return 0.0
    per_day_cap = min(absence.hours, PARTIAL_DAY_MAX_HOURS)
    total = 0.0
    for day in days_in_range(*window):
        scheduled = schedule.hours_on(day)
        if scheduled <= 0:
            continue
        total += scheduled if absence.hours == 0 else min(per_day_cap, scheduled)
    return total


def absence_hours(
    range_start: DateLike,
    range_end: DateLike,
    absences: Iterable[AbsenceRecord],
    schedule: WorkSchedule,
) -> float:
    """Capacity hours ``[range_start, range_end]`` loses to absences.

    Overlapping absences are each counted.
    """
    start, end = as_date(range_start), as_date(range_end)
    return round2(sum(_hours_for(a, start, end, schedule) for a in absences))


def absence_details(
    range_start: DateLike,
    range_end: DateLike,
    absences: Iterable[AbsenceRecord],
    schedule: WorkSchedule,
) -> list[AbsenceDetail]:
    start, end = as_date(range_start), as_date(range_end)
    details: list[AbsenceDetail] = []
    for a in sorted(absences, key=lambda x: (x.start_date, x.id)):
        window = _clip(a, start, end)
        if window is None:
            continue
        hours = round2(_hours_for(a, start, end, schedule))
        if hours > 0:
            details.append(AbsenceDetail(a.id, a.type, window[0], window[1], hours))
    return details
