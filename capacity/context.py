"""Per-session scheduling state.

A ``SchedulingContext`` is built once per session from a database snapshot,
kept current by change notifications, and closed on logout. All writes go
through ``optimistic``: the change is applied locally, the write is issued,
and the local copy is reconciled with the confirmed row or rolled back.
"""
from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Any, Callable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from absence.models import Absence
from allocation.models import Allocation
from core.realtime import ChangeEvent, ChangeFeed
from employee.models import Employee
from teamevent.models import TeamEvent
from .engine import CapacityEngine
from .records import AbsenceRecord, AllocationRecord, EmployeeRecord, Snapshot, TeamEventRecord

_logger = logging.getLogger(__name__)

# table name -> (snapshot attribute, record type)
TABLES: dict[str, tuple[str, type]] = {
    Employee.__tablename__: ("employees", EmployeeRecord),
    Allocation.__tablename__: ("allocations", AllocationRecord),
    Absence.__tablename__: ("absences", AbsenceRecord),
    TeamEvent.__tablename__: ("team_events", TeamEventRecord),
}


class SchedulingContext:
    def __init__(self, snapshot: Optional[Snapshot] = None):
        self.snapshot = snapshot or Snapshot()
        self._lock = threading.RLock()
        self._unsubscribes: list[Callable[[], None]] = []
        self.closed = False

    # ---------- lifecycle ----------

    @classmethod
    def from_session(
        cls,
        db: Session,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> "SchedulingContext":
        """Load a snapshot; ``start``/``end`` narrow allocations, absences and events."""
        alloc_stmt = select(Allocation)
        absence_stmt = select(Absence)
        event_stmt = select(TeamEvent)
        if start is not None:
            alloc_stmt = alloc_stmt.where(Allocation.week_start_date >= start)
            absence_stmt = absence_stmt.where(Absence.end_date >= start)
            event_stmt = event_stmt.where(TeamEvent.date >= start)
        if end is not None:
            alloc_stmt = alloc_stmt.where(Allocation.week_start_date <= end)
            absence_stmt = absence_stmt.where(Absence.start_date <= end)
            event_stmt = event_stmt.where(TeamEvent.date <= end)

        snapshot = Snapshot(
            employees={r.id: EmployeeRecord.from_obj(r) for r in db.scalars(select(Employee))},
            allocations={r.id: AllocationRecord.from_obj(r) for r in db.scalars(alloc_stmt)},
            absences={r.id: AbsenceRecord.from_obj(r) for r in db.scalars(absence_stmt)},
            team_events={r.id: TeamEventRecord.from_obj(r) for r in db.scalars(event_stmt)},
        )
        return cls(snapshot)

    def attach(self, feed: ChangeFeed) -> "SchedulingContext":
        """Follow row changes of the four scheduling tables."""
        for table in TABLES:
            self._unsubscribes.append(feed.subscribe(table, self.apply_change))
        return self

    def close(self) -> None:
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes.clear()
        with self._lock:
            self.snapshot = Snapshot()
        self.closed = True

    # ---------- incoming changes ----------

    def _collection(self, table: str) -> tuple[dict[int, Any], type]:
        attr, record_type = TABLES[table]
        return getattr(self.snapshot, attr), record_type

    def apply_change(self, evt: ChangeEvent) -> None:
        if evt.table not in TABLES:
            return
        with self._lock:
            rows, record_type = self._collection(evt.table)
            if evt.type == "DELETE":
                rows.pop((evt.old or {}).get("id"), None)
                return
            record = record_type.from_obj(evt.new)
            rows[record.id] = record

    # ---------- outgoing writes ----------

    def optimistic(self, table: str, record: Any, write: Callable[[], Any], *, delete: bool = False) -> Any:
        """Apply ``record`` locally, run ``write``, then reconcile or roll back.

        ``write`` returns the confirmed row (ORM object or mapping) or ``None``.
        On failure the previous local state is restored and the error re-raised.
        """
        with self._lock:
            rows, record_type = self._collection(table)
            previous = rows.get(record.id)
            if delete:
                rows.pop(record.id, None)
            else:
                rows[record.id] = record
        try:
            confirmed = write()
        except Exception:
            with self._lock:
                if previous is None:
                    rows.pop(record.id, None)
                else:
                    rows[record.id] = previous
            _logger.warning("write to %s rolled back locally", table)
            raise
        if confirmed is not None and not delete:
            confirmed_record = record_type.from_obj(confirmed)
            with self._lock:
                if confirmed_record.id != record.id:
                    rows.pop(record.id, None)
                rows[confirmed_record.id] = confirmed_record
        return confirmed

    # ---------- reads ----------

    def engine(self) -> CapacityEngine:
        with self._lock:
            frozen = Snapshot(
                employees=dict(self.snapshot.employees),
                allocations=dict(self.snapshot.allocations),
                absences=dict(self.snapshot.absences),
                team_events=dict(self.snapshot.team_events),
            )
        return CapacityEngine(frozen)
