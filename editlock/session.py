"""Editor-side lifecycle of one (project, month) edit lock.

``EditSession`` is what an editing panel holds while it is open:

* ``open()`` acquires the lock (or reports who holds it) and starts renewing
  it every ``renew_seconds``;
* ``schedule_save(payload)`` debounces writes: the save runs
  ``debounce_seconds`` after the last call;
* ``save_now(payload)`` clears any pending timer first, then saves at once
  (blur / Enter), so no stale debounced write lands afterwards;
* ``close()`` drops the pending save, stops renewing and releases the lock
  without waiting for the store.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session, sessionmaker

from core.config_loader import settings
from . import service
from .schema import LockStatus

_logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], Any]


def _thread_timer(interval: float, fn: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, fn)
    timer.daemon = True
    return timer


class EditSession:
    def __init__(
        self,
        session_factory: sessionmaker,
        project_id: int,
        month: str,
        employee_id: int,
        save: Callable[[Session, Any], None],
        *,
        ttl_seconds: Optional[int] = None,
        renew_seconds: Optional[float] = None,
        debounce_seconds: Optional[float] = None,
        timer_factory: TimerFactory = _thread_timer,
        on_lock_lost: Optional[Callable[[LockStatus], None]] = None,
    ):
        self.session_factory = session_factory
        self.project_id = project_id
        self.month = month
        self.employee_id = employee_id
        self._save = save
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.LOCK_TTL_SECONDS
        self.renew_seconds = renew_seconds if renew_seconds is not None else settings.LOCK_RENEW_SECONDS
        self.debounce_seconds = (
            debounce_seconds if debounce_seconds is not None else settings.AUTOSAVE_DEBOUNCE_SECONDS
        )
        self._timer_factory = timer_factory
        self._on_lock_lost = on_lock_lost

        self._mutex = threading.RLock()
        self._save_timer = None
        self._pending_payload: Any = None
        self._renew_timer = None
        self.status: Optional[LockStatus] = None
        self.is_open = False

    # ---------- lock lifecycle ----------

    def open(self) -> LockStatus:
        with self.session_factory() as db:
            status = service.acquire_lock(
                db, self.project_id, self.month, self.employee_id, ttl_seconds=self.ttl_seconds
            )
        self.status = status
        if not status.acquired:
            return status
        with self._mutex:
            self.is_open = True
            self._schedule_renewal()
        return status

    def _schedule_renewal(self) -> None:
        self._renew_timer = self._timer_factory(self.renew_seconds, self._renew)
        self._renew_timer.start()

    def _renew(self) -> None:
        with self._mutex:
            if not self.is_open:
                return
        with self.session_factory() as db:
            status = service.renew_lock(
                db, self.project_id, self.month, self.employee_id, ttl_seconds=self.ttl_seconds
            )
        with self._mutex:
            if not self.is_open:
                return
            self.status = status
            if status.acquired:
                self._schedule_renewal()
                return
            self.is_open = False
            self._cancel_save()
        _logger.info("edit session project=%s month=%s lost its lock", self.project_id, self.month)
        if self._on_lock_lost is not None:
            self._on_lock_lost(status)

    def close(self) -> None:
        with self._mutex:
            was_open = self.is_open
            if self.has_pending_save:
                _logger.info("edit session project=%s month=%s closed with an unsaved change", self.project_id, self.month)
            self.is_open = False
            self._cancel_save()
            if self._renew_timer is not None:
                self._renew_timer.cancel()
                self._renew_timer = None
        if was_open and self.status is not None and not self.status.fail_open:
            self._timer_factory(0, self._release).start()

    def _release(self) -> None:
        with self.session_factory() as db:
            service.release_lock(db, self.project_id, self.month, self.employee_id)

    # ---------- autosave ----------

    def _cancel_save(self) -> None:
        if self._save_timer is not None:
            self._save_timer.cancel()
            self._save_timer = None
        self._pending_payload = None

    def schedule_save(self, payload: Any) -> None:
        with self._mutex:
            if not self.is_open:
                raise RuntimeError("edit session is not open")
            if self._save_timer is not None:
                self._save_timer.cancel()
            self._pending_payload = payload
            self._save_timer = self._timer_factory(self.debounce_seconds, self._flush)
            self._save_timer.start()

    def _flush(self) -> None:
        with self._mutex:
            if not self.is_open or self._save_timer is None:
                return
            payload = self._pending_payload
            self._save_timer = None
            self._pending_payload = None
        self._write(payload)

    def save_now(self, payload: Any = None) -> None:
        """Save immediately; with no payload, flush whatever is pending."""
        with self._mutex:
            if not self.is_open:
                raise RuntimeError("edit session is not open")
            pending = self._pending_payload
            self._cancel_save()
        target = payload if payload is not None else pending
        if target is not None:
            self._write(target)

    def _write(self, payload: Any) -> None:
        with self.session_factory() as db:
            self._save(db, payload)

    @property
    def has_pending_save(self) -> bool:
        with self._mutex:
            return self._save_timer is not None
