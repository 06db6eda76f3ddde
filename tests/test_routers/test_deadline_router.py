import unittest
from types import SimpleNamespace as Obj
from unittest.mock import patch

from fastapi import HTTPException
from fastapi.testclient import TestClient

from main import app
from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_planner


def _deadline(**kw):
    row = dict(id=3, project_id=1, month="2025-03", notes=None, employee_hours={"10": 8.0},
               is_hidden=False, total_hours=8.0, updated_by=5, updated_at="2025-03-03T09:00:00Z")
    row.update(kw)
    return Obj(**row)


class DeadlineRouterTests(unittest.TestCase):
    def setUp(self):
        class FakeDB:
            def rollback(self): pass
        def _fake_db():
            yield FakeDB()

        app.dependency_overrides[get_db] = _fake_db
        app.dependency_overrides[get_current_active_user] = lambda: Obj(id=5, is_planner=True)
        app.dependency_overrides[require_planner] = lambda: 5
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_current_active_user, None)
        app.dependency_overrides.pop(require_planner, None)

    @patch("deadline.router.service.get_deadlines")
    def test_list_by_month(self, mock_list):
        mock_list.return_value = [_deadline()]
        resp = self.client.get("/api/deadlines?month=2025-03&include_hidden=false")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()[0]["employee_hours"], {"10": 8.0})
        self.assertEqual(mock_list.call_args.kwargs, {"month": "2025-03", "include_hidden": False})

    def test_list_requires_month(self):
        self.assertEqual(self.client.get("/api/deadlines").status_code, 422)

    @patch("deadline.router.service.save_deadline")
    def test_save_passes_editor(self, mock_save):
        mock_save.return_value = _deadline(notes="Launch")
        resp = self.client.put("/api/deadlines/projects/1/2025-03",
                               json={"notes": "Launch", "employee_hours": {"10": 8}})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(mock_save.call_args.kwargs["editor_id"], 5)
        dto = mock_save.call_args.args[3]
        self.assertEqual(dto.employee_hours, {10: 8.0})

    @patch("deadline.router.service.save_deadline")
    def test_save_concurrent_create_409(self, mock_save):
        mock_save.side_effect = HTTPException(status_code=409, detail="deadline was created concurrently; reload and retry")
        resp = self.client.put("/api/deadlines/projects/1/2025-03", json={"employee_hours": {}})
        self.assertEqual(resp.status_code, 409)
        self.assertIn("concurrently", resp.json()["detail"])

    def test_save_negative_hours_422(self):
        resp = self.client.put("/api/deadlines/projects/1/2025-03", json={"employee_hours": {"10": -1}})
        self.assertEqual(resp.status_code, 422)

    @patch("deadline.router.service.set_hidden")
    def test_visibility(self, mock_hide):
        mock_hide.return_value = _deadline(is_hidden=True)
        resp = self.client.patch("/api/deadlines/3/visibility", json={"is_hidden": True})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertTrue(resp.json()["is_hidden"])

    @patch("deadline.router.service.delete_deadline")
    def test_delete_404(self, mock_delete):
        mock_delete.return_value = False
        resp = self.client.delete("/api/deadlines/3")
        self.assertEqual(resp.status_code, 404)
