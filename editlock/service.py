"""Advisory, time-boxed edit locks over a (project, month) key.

A lock is live while ``expires_at`` is in the future. Acquiring reads the
current row first and refuses when someone else holds a live lock; otherwise
it overwrites the (project, month) row. Renew and release only ever touch the
caller's own row. Persistence errors on acquire and renew fail open: the
caller may edit without a lock.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.config_loader import settings
from .models import EditLock
from .schema import LockStatus

_logger = logging.getLogger(__name__)


# -------- helpers --------

def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def _ttl(ttl_seconds: Optional[int]) -> timedelta:
    return timedelta(seconds=ttl_seconds if ttl_seconds is not None else settings.LOCK_TTL_SECONDS)


def is_live(lock: EditLock, now: Optional[datetime] = None) -> bool:
    return _aware(lock.expires_at) > (now or utcnow())


def _status(lock: EditLock, *, acquired: bool) -> LockStatus:
    return LockStatus(
        project_id=lock.project_id,
        month=lock.month,
        acquired=acquired,
        holder_id=lock.employee_id,
        holder_name=lock.holder_name,
        expires_at=_aware(lock.expires_at),
    )


def _fail_open(db: Session, project_id: int, month: str, employee_id: int, action: str) -> LockStatus:
    db.rollback()
    _logger.warning(
        "edit lock %s failed for project=%s month=%s employee=%s; continuing without lock",
        action, project_id, month, employee_id, exc_info=True,
    )
    return LockStatus(
        project_id=project_id,
        month=month,
        acquired=True,
        holder_id=employee_id,
        fail_open=True,
    )


# -------- queries --------

def get_lock_row(db: Session, project_id: int, month: str) -> EditLock | None:
    """The (project, month) row whether live or not."""
    stmt = select(EditLock).where(EditLock.project_id == project_id, EditLock.month == month)
    return db.scalars(stmt).first()


def get_live_lock(db: Session, project_id: int, month: str, now: Optional[datetime] = None) -> EditLock | None:
    row = get_lock_row(db, project_id, month)
    if row is None or not is_live(row, now):
        return None
    return row


def get_live_locks(db: Session, *, month: Optional[str] = None, now: Optional[datetime] = None) -> List[EditLock]:
    stmt = select(EditLock).where(EditLock.expires_at > (now or utcnow()))
    if month is not None:
        stmt = stmt.where(EditLock.month == month)
    stmt = stmt.order_by(EditLock.project_id)
    return list(db.scalars(stmt))


# -------- mutations --------

def prune_expired(db: Session, now: Optional[datetime] = None) -> int:
    """Delete rows whose lease ran out (crashed sessions never release)."""
    rows = list(db.scalars(select(EditLock).where(EditLock.expires_at <= (now or utcnow()))))
    for row in rows:
        db.delete(row)
    if rows:
        db.commit()
        _logger.debug("pruned %d expired edit locks", len(rows))
    return len(rows)


def _write_lock(db: Session, project_id: int, month: str, employee_id: int, now: datetime, expires: datetime) -> EditLock:
    row = db.scalars(
        select(EditLock)
        .where(EditLock.project_id == project_id, EditLock.month == month)
        .with_for_update()
    ).first()
    if row is None:
        row = EditLock(project_id=project_id, month=month, employee_id=employee_id, locked_at=now, expires_at=expires)
        db.add(row)
    else:
        if row.employee_id != employee_id:
            row.locked_at = now
        row.employee_id = employee_id
        row.expires_at = expires
    db.commit()
    db.refresh(row)
    return row


def acquire_lock(
    db: Session,
    project_id: int,
    month: str,
    employee_id: int,
    *,
    ttl_seconds: Optional[int] = None,
    now: Optional[datetime] = None,
) -> LockStatus:
    now = now or utcnow()
    expires = now + _ttl(ttl_seconds)
    try:
        prune_expired(db, now)

        current = get_live_lock(db, project_id, month, now)
        if current is not None and current.employee_id != employee_id:
            _logger.info(
                "edit lock project=%s month=%s held by %s; refused for %s",
                project_id, month, current.employee_id, employee_id,
            )
            return _status(current, acquired=False)

        try:
            row = _write_lock(db, project_id, month, employee_id, now, expires)
        except IntegrityError:
            # another session inserted the row between our read and write
            db.rollback()
            row = _write_lock(db, project_id, month, employee_id, now, expires)
        return _status(row, acquired=True)
    except SQLAlchemyError:
        return _fail_open(db, project_id, month, employee_id, "acquire")


def renew_lock(
    db: Session,
    project_id: int,
    month: str,
    employee_id: int,
    *,
    ttl_seconds: Optional[int] = None,
    now: Optional[datetime] = None,
) -> LockStatus:
    """Push the caller's own lease forward. Never creates or takes over a row."""
    now = now or utcnow()
    try:
        row = db.scalars(
            select(EditLock)
            .where(
                EditLock.project_id == project_id,
                EditLock.month == month,
                EditLock.employee_id == employee_id,
            )
            .with_for_update()
        ).first()
        if row is None:
            current = get_live_lock(db, project_id, month, now)
            _logger.info("edit lock project=%s month=%s lost by %s", project_id, month, employee_id)
            if current is None:
                return LockStatus(project_id=project_id, month=month, acquired=False)
            return _status(current, acquired=False)

        row.expires_at = now + _ttl(ttl_seconds)
        db.commit()
        db.refresh(row)
        return _status(row, acquired=True)
    except SQLAlchemyError:
        return _fail_open(db, project_id, month, employee_id, "renew")


def release_lock(db: Session, project_id: int, month: str, employee_id: int) -> bool:
    """Delete the caller's own lock. Best effort: errors are logged, not raised."""
    try:
        row = db.scalars(
            select(EditLock).where(
                EditLock.project_id == project_id,
                EditLock.month == month,
                EditLock.employee_id == employee_id,
            )
        ).first()
        if row is None:
            return False
        db.delete(row)
        db.commit()
        return True
    except SQLAlchemyError:
        db.rollback()
        _logger.warning(
            "edit lock release failed for project=%s month=%s employee=%s",
            project_id, month, employee_id, exc_info=True,
        )
        return False
