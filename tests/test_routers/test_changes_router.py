import asyncio
import json
import unittest
from datetime import date

from fastapi import HTTPException

from core.realtime import ChangeEvent
from core.router import _event_generator, month_filter


class FakeRequest:
    def __init__(self, connected_polls):
        self.polls = 0
        self.connected_polls = connected_polls

    async def is_disconnected(self):
        self.polls += 1
        return self.polls > self.connected_polls


class ChangeStreamTests(unittest.TestCase):
    def _collect(self, request, events):
        unsubscribed = []

        async def run():
            queue = asyncio.Queue()
            for evt in events:
                queue.put_nowait(evt)
            chunks = []
            async for chunk in _event_generator(request, queue, lambda: unsubscribed.append(True)):
                chunks.append(chunk)
            return chunks

        return asyncio.run(run()), unsubscribed

    def test_streams_events_until_disconnect(self):
        evt = ChangeEvent(table="edit_locks", type="INSERT", new={"project_id": 1, "month": "2025-03"})
        chunks, unsubscribed = self._collect(FakeRequest(connected_polls=1), [evt])

        self.assertEqual(chunks[0], "event: connected\ndata: {}\n\n")
        self.assertEqual(len(chunks), 2)
        header, data = chunks[1].strip().split("\n")
        self.assertEqual(header, "event: edit_locks")
        payload = json.loads(data[len("data: "):])
        self.assertEqual(payload["type"], "INSERT")
        self.assertEqual(payload["new"]["month"], "2025-03")
        self.assertEqual(unsubscribed, [True])

    def test_immediate_disconnect_unsubscribes(self):
        chunks, unsubscribed = self._collect(FakeRequest(connected_polls=0), [])
        self.assertEqual(len(chunks), 1)
        self.assertEqual(unsubscribed, [True])


class MonthFilterTests(unittest.TestCase):
    def test_month_column_tables_match_on_equality(self):
        for table in ("edit_locks", "deadlines"):
            self.assertEqual(month_filter(table, "2025-03"), {"month": "2025-03"})

    def test_allocations_match_on_week_key(self):
        flt = month_filter("allocations", "2025-03")
        self.assertTrue(flt({"week_start_date": date(2025, 3, 1)}))
        self.assertTrue(flt({"week_start_date": "2025-03-31"}))
        self.assertFalse(flt({"week_start_date": date(2025, 2, 24)}))
        self.assertFalse(flt({"week_start_date": None}))

    def test_team_events_match_on_date(self):
        flt = month_filter("team_events", "2024-02")
        self.assertTrue(flt({"date": date(2024, 2, 29)}))
        self.assertFalse(flt({"date": date(2024, 3, 1)}))

    def test_absences_match_when_range_overlaps(self):
        flt = month_filter("absences", "2025-03")
        self.assertTrue(flt({"start_date": date(2025, 2, 20), "end_date": date(2025, 3, 1)}))
        self.assertTrue(flt({"start_date": date(2025, 3, 31), "end_date": date(2025, 4, 2)}))
        self.assertTrue(flt({"start_date": date(2025, 2, 1), "end_date": date(2025, 4, 30)}))
        self.assertFalse(flt({"start_date": date(2025, 2, 1), "end_date": date(2025, 2, 28)}))

    def test_tables_without_a_period_reject_month(self):
        with self.assertRaises(HTTPException) as ctx:
            month_filter("projects", "2025-03")
        self.assertEqual(ctx.exception.status_code, 422)
