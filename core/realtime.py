"""Row-change notifications.

A ``ChangeFeed`` is an in-process subscriber registry: handlers register for a
table (optionally narrowed by an equality filter or a row predicate) and receive a ``ChangeEvent``
for every committed INSERT, UPDATE or DELETE on that table.

``install_change_capture`` wires a feed to a SQLAlchemy ``sessionmaker`` so
that rows flushed inside a transaction are published only once the
transaction commits.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Literal, Mapping, Optional, Union

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session, sessionmaker

_logger = logging.getLogger(__name__)

ChangeType = Literal["INSERT", "UPDATE", "DELETE"]

_PENDING_KEY = "pending_changes"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    type: ChangeType
    new: Optional[dict[str, Any]] = None
    old: Optional[dict[str, Any]] = None

    def as_payload(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "type": self.type,
            "new": _jsonable(self.new),
            "old": _jsonable(self.old),
        }


Handler = Callable[[ChangeEvent], None]
RowFilter = Union[Mapping[str, Any], Callable[[Mapping[str, Any]], bool]]


def _matches(evt: ChangeEvent, flt: Optional[RowFilter]) -> bool:
    if not flt:
        return True
    for candidate in (evt.new, evt.old):
        if candidate is None:
            continue
        if callable(flt):
            if flt(candidate):
                return True
        elif all(candidate.get(k) == v for k, v in flt.items()):
            return True
    return False


class ChangeFeed:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[tuple[str, Optional[RowFilter], Handler]] = []

    def subscribe(
        self,
        table: str,
        handler: Handler,
        filter: Optional[RowFilter] = None,
    ) -> Callable[[], None]:
        """Register ``handler`` for ``table``; returns an unsubscribe callable.

        ``filter`` is either a mapping of column values that must all match or
        a predicate over the row. Either is tried against the new and the old
        row state, so an update moving a row out of a period still reaches
        observers of that period when the old state is known.
        """
        if filter is None or callable(filter):
            flt = filter
        else:
            flt = dict(filter)
        entry = (table, flt, handler)
        with self._lock:
            self._subscribers.append(entry)
        _logger.debug("subscribed to %s (filter=%s)", table, filter)

        def unsubscribe() -> None:
            with self._lock:
                try:
                    self._subscribers.remove(entry)
                except ValueError:
                    pass

        return unsubscribe

    def publish(self, evt: ChangeEvent) -> None:
        with self._lock:
            targets = [
                h for table, flt, h in self._subscribers
                if table == evt.table and _matches(evt, flt)
            ]
        for handler in targets:
            try:
                handler(evt)
            except Exception:
                _logger.exception("change handler failed for %s %s", evt.type, evt.table)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)


# ---------- SQLAlchemy capture ----------

def row_to_dict(obj: Any) -> dict[str, Any]:
    mapper = inspect(obj).mapper
    return {attr.key: getattr(obj, attr.key) for attr in mapper.column_attrs}


def _jsonable(row: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    if row is None:
        return None
    out: dict[str, Any] = {}
    for k, v in row.items():
        if isinstance(v, (datetime, date)):
            out[k] = v.isoformat()
        elif isinstance(v, Enum):
            out[k] = v.value
        else:
            out[k] = v
    return out


def install_change_capture(factory: sessionmaker, feed: ChangeFeed) -> Callable[[], None]:
    """Publish committed ORM changes made through ``factory`` sessions to ``feed``.

    Rows are snapshotted at flush time (attributes may be expired after
    commit) and coalesced per row, so a row inserted then updated inside one
    transaction is published once as an INSERT with its final state.
    Returns a callable that removes the listeners again.
    """

    def _key(obj: Any) -> tuple:
        return (obj.__tablename__, tuple(inspect(obj).mapper.primary_key_from_instance(obj)))

    def _before_flush(session: Session, _flush_context, _instances) -> None:
        # deleted rows can no longer be loaded once the DELETE has run
        pending: dict[tuple, tuple[str, str, dict[str, Any]]] = session.info.setdefault(_PENDING_KEY, {})
        for obj in session.deleted:
            key = _key(obj)
            if key in pending and pending[key][0] == "INSERT":
                del pending[key]
                continue
            pending[key] = ("DELETE", obj.__tablename__, row_to_dict(obj))

    def _after_flush(session: Session, _flush_context) -> None:
        pending: dict[tuple, tuple[str, str, dict[str, Any]]] = session.info.setdefault(_PENDING_KEY, {})
        for obj in session.new:
            pending[_key(obj)] = ("INSERT", obj.__tablename__, row_to_dict(obj))
        for obj in session.dirty:
            if not session.is_modified(obj, include_collections=False):
                continue
            key = _key(obj)
            kind = pending[key][0] if key in pending else "UPDATE"
            pending[key] = (kind, obj.__tablename__, row_to_dict(obj))

    def _after_commit(session: Session) -> None:
        pending = session.info.pop(_PENDING_KEY, {})
        for kind, table, snapshot in pending.values():
            if kind == "DELETE":
                feed.publish(ChangeEvent(table=table, type="DELETE", old=snapshot))
            else:
                feed.publish(ChangeEvent(table=table, type=kind, new=snapshot))

    def _after_rollback(session: Session, _previous_transaction) -> None:
        session.info.pop(_PENDING_KEY, None)

    event.listen(factory, "before_flush", _before_flush)
    event.listen(factory, "after_flush", _after_flush)
    event.listen(factory, "after_commit", _after_commit)
    event.listen(factory, "after_soft_rollback", _after_rollback)

    def remove() -> None:
        event.remove(factory, "before_flush", _before_flush)
        event.remove(factory, "after_flush", _after_flush)
        event.remove(factory, "after_commit", _after_commit)
        event.remove(factory, "after_soft_rollback", _after_rollback)

    return remove
