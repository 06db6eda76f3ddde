import unittest
from types import SimpleNamespace as Obj
from unittest.mock import patch

from fastapi.testclient import TestClient

from main import app
from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_planner


def _event(**kw):
    row = dict(id=1, name="Offsite", date="2025-03-06", hours_reduction=2.0, full_day=False,
               affects_all=True, affected_employee_ids=None, description=None)
    row.update(kw)
    return Obj(**row)


class TeamEventRouterTests(unittest.TestCase):
    def setUp(self):
        class FakeDB:
            def rollback(self): pass
        def _fake_db():
            yield FakeDB()

        app.dependency_overrides[get_db] = _fake_db
        app.dependency_overrides[get_current_active_user] = lambda: Obj(id=123, is_planner=True)
        app.dependency_overrides[require_planner] = lambda: 123
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_current_active_user, None)
        app.dependency_overrides.pop(require_planner, None)

    @patch("teamevent.router.service.get_team_events")
    def test_list_for_employee(self, mock_list):
        mock_list.return_value = [_event(), _event(id=2, affects_all=False, affected_employee_ids=[10])]
        resp = self.client.get("/api/team-events?employee_id=10")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()[1]["affected_employee_ids"], [10])

    @patch("teamevent.router.service.create_team_event")
    def test_create_full_day(self, mock_create):
        mock_create.return_value = _event(full_day=True, hours_reduction=0.0)
        resp = self.client.post("/api/team-events", json={"name": "Holiday", "date": "2025-03-06", "full_day": True})
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertTrue(resp.json()["full_day"])

    def test_create_without_reduction_422(self):
        resp = self.client.post("/api/team-events", json={"name": "Nothing", "date": "2025-03-06"})
        self.assertEqual(resp.status_code, 422)

    @patch("teamevent.router.service.get_team_event")
    def test_get_404(self, mock_get):
        mock_get.return_value = None
        resp = self.client.get("/api/team-events/3")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "team event not found")

    @patch("teamevent.router.service.update_team_event")
    def test_patch_null_date_422(self, mock_update):
        resp = self.client.patch("/api/team-events/3", json={"date": None})
        self.assertEqual(resp.status_code, 422)
        mock_update.assert_not_called()
