"""Calendar and range helpers shared by the capacity reducers.

Weeks start on Monday. A month is partitioned into week buckets; the first
and last bucket are clipped to the month so that a week straddling two months
contributes only its in-month days to either month.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterator, Mapping, Union

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_CENT = Decimal("0.01")

DateLike = Union[date, str]


def round2(value: float) -> float:
    """Round half away from zero at the second decimal.

    Goes through ``repr`` so that 1.005 rounds to 1.01 instead of falling
    victim to its binary representation.
    """
    return float(Decimal(repr(float(value))).quantize(_CENT, rounding=ROUND_HALF_UP))


def as_date(value: DateLike) -> date:
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    return value


@dataclass(frozen=True)
class WorkSchedule:
    """Hours owed per weekday."""
    monday: float = 0.0
    tuesday: float = 0.0
    wednesday: float = 0.0
    thursday: float = 0.0
    friday: float = 0.0
    saturday: float = 0.0
    sunday: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, float]) -> "WorkSchedule":
        return cls(**{day: float(data.get(day) or 0.0) for day in WEEKDAYS})

    @classmethod
    def from_obj(cls, obj) -> "WorkSchedule":
        return cls(**{day: float(getattr(obj, day, 0.0) or 0.0) for day in WEEKDAYS})

    def hours_on(self, day: date) -> float:
        return getattr(self, WEEKDAYS[day.weekday()])

    @property
    def weekly_total(self) -> float:
        return round2(sum(getattr(self, d) for d in WEEKDAYS))


@dataclass(frozen=True)
class WeekBucket:
    week_start: date
    week_end: date
    effective_start: date
    effective_end: date
    storage_key: str

    @property
    def is_clipped(self) -> bool:
        return self.effective_start != self.week_start or self.effective_end != self.week_end

    @property
    def label(self) -> str:
        return f"{self.effective_start.day}-{self.effective_end.day}"


def days_in_range(start: date, end: date) -> Iterator[date]:
    cur = start
    one = timedelta(days=1)
    while cur <= end:
        yield cur
        cur += one


def week_start(d: date) -> date:
    return d - timedelta(days=d.weekday())


def week_end(start: date) -> date:
    return start + timedelta(days=6)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def working_hours_in_range(start: DateLike, end: DateLike, schedule: WorkSchedule) -> float:
    """Scheduled hours over ``[start, end]`` inclusive. Holidays are not known here."""
    return working_days_in_range(start, end, schedule)[0]


def working_days_in_range(start: DateLike, end: DateLike, schedule: WorkSchedule) -> tuple[float, int]:
    """Return ``(total_hours, worked_days)`` over ``[start, end]`` inclusive."""
    total = 0.0
    days = 0
    for d in days_in_range(as_date(start), as_date(end)):
        hours = schedule.hours_on(d)
        if hours > 0:
            total += hours
            days += 1
    return round2(total), days


def monthly_capacity(year: int, month: int, schedule: WorkSchedule) -> float:
    first, last = month_bounds(year, month)
    return working_hours_in_range(first, last, schedule)


def storage_key(week_start_date: DateLike, year: int, month: int) -> str:
    """Persistence key of a week bucket within a month.

    A week that starts in the previous month is keyed by the first of the
    month, so the two halves of a straddling week have distinct keys and each
    key falls inside the month it belongs to.
    """
    first, _ = month_bounds(year, month)
    return max(as_date(week_start_date), first).isoformat()


def key_in_month(key: DateLike, year: int, month: int) -> bool:
    d = as_date(key)
    return d.year == year and d.month == month


def _has_weekday(start: date, end: date) -> bool:
    return any(d.weekday() < 5 for d in days_in_range(start, end))


def weeks_for_month(year: int, month: int, *, working_days_only: bool = False) -> list[WeekBucket]:
    """Monday-start week buckets covering the month, clipped at both edges.

    With ``working_days_only`` an edge bucket whose in-month part holds no
    Monday-Friday day is dropped (how the planner grid shows a month).
    """
    first, last = month_bounds(year, month)
    buckets: list[WeekBucket] = []
    start = week_start(first)
    while start <= last:
        end = week_end(start)
        eff_start = max(start, first)
        eff_end = min(end, last)
        if not working_days_only or _has_weekday(eff_start, eff_end):
            buckets.append(WeekBucket(
                week_start=start,
                week_end=end,
                effective_start=eff_start,
                effective_end=eff_end,
                storage_key=storage_key(start, year, month),
            ))
        start += timedelta(days=7)
    return buckets


def is_storage_key(key: DateLike) -> bool:
    d = as_date(key)
    return d.weekday() == 0 or d.day == 1
