"""Server-Sent Events stream of committed row changes."""
from __future__ import annotations

import asyncio
import json
import logging
from datetime import date
from typing import Any, AsyncGenerator, Mapping, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import StreamingResponse

from auth.services.auth_service import get_current_active_user
from capacity.periods import as_date, month_bounds
from editlock.schema import MONTH_PATTERN
from .realtime import ChangeEvent, ChangeFeed, RowFilter

_logger = logging.getLogger(__name__)

changes_router = APIRouter(prefix="/changes", tags=["Changes"])

KEEPALIVE_SECONDS = 25.0


def get_feed(request: Request) -> ChangeFeed:
    return request.app.state.change_feed


def _in_window(value: Any, first: date, last: date) -> bool:
    return value is not None and first <= as_date(value) <= last


def month_filter(table: str, month: str) -> RowFilter:
    """Row filter limiting ``table`` to rows that touch ``month`` (YYYY-MM)."""
    if table in ("edit_locks", "deadlines"):
        return {"month": month}
    first, last = month_bounds(int(month[:4]), int(month[5:7]))
    if table == "allocations":
        # storage keys are clipped to the month, so the key itself decides
        return lambda row: _in_window(row.get("week_start_date"), first, last)
    if table == "team_events":
        return lambda row: _in_window(row.get("date"), first, last)
    if table == "absences":
        def _overlaps(row: Mapping[str, Any]) -> bool:
            start, end = row.get("start_date"), row.get("end_date")
            if start is None or end is None:
                return False
            return as_date(start) <= last and as_date(end) >= first
        return _overlaps
    raise HTTPException(status_code=422, detail=f"{table} cannot be filtered by month")


async def _event_generator(request: Request, queue: asyncio.Queue, unsubscribe) -> AsyncGenerator[str, None]:
    try:
        yield "event: connected\ndata: {}\n\n"
        while True:
            if await request.is_disconnected():
                break
            try:
                evt: ChangeEvent = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                yield f"event: {evt.table}\ndata: {json.dumps(evt.as_payload())}\n\n"
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
    finally:
        unsubscribe()
        _logger.debug("change stream client disconnected")


@changes_router.get("", summary="Row change stream")
async def change_stream(
    request: Request,
    table: str = Query(..., description="e.g. edit_locks, allocations"),
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="Only rows touching this YYYY-MM"),
    feed: ChangeFeed = Depends(get_feed),
    user=Depends(get_current_active_user),
):
    row_filter = month_filter(table, month) if month else None
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue(maxsize=100)

    def _put(evt: ChangeEvent) -> None:
        if queue.full():
            _logger.warning("change stream for %s is lagging; dropping %s event", table, evt.type)
            return
        queue.put_nowait(evt)

    def _enqueue(evt: ChangeEvent) -> None:
        # handlers run on the committing thread
        try:
            loop.call_soon_threadsafe(_put, evt)
        except RuntimeError:
            _logger.debug("change stream loop already closed")

    unsubscribe = feed.subscribe(table, _enqueue, row_filter)
    _logger.debug("change stream opened for %s; %d subscribers", table, feed.subscriber_count)
    return StreamingResponse(
        _event_generator(request, queue, unsubscribe),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
            "Connection": "keep-alive",
        },
    )
