import unittest
from datetime import date
from types import SimpleNamespace as Obj
from unittest.mock import patch

from fastapi import HTTPException
from fastapi.testclient import TestClient

from main import app
from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_planner


def _absence(**kw):
    row = dict(id=1, employee_id=10, start_date="2025-03-05", end_date="2025-03-05",
               type="vacation", hours=0.0, description=None)
    row.update(kw)
    return Obj(**row)


class AbsenceRouterTests(unittest.TestCase):
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

    @patch("absence.router.service.get_absences")
    def test_list_with_window(self, mock_list):
        mock_list.return_value = [_absence(), _absence(id=2, employee_id=11, type="sick")]
        resp = self.client.get("/api/absences?start=2025-03-03&end=2025-03-09")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(len(resp.json()), 2)
        self.assertEqual(mock_list.call_args.kwargs["overlaps_start"], date(2025, 3, 3))

    @patch("absence.router.service.get_absence")
    def test_get_404(self, mock_get):
        mock_get.return_value = None
        resp = self.client.get("/api/absences/999")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "absence not found")

    @patch("absence.router.service.create_absence")
    def test_create_201(self, mock_create):
        mock_create.return_value = _absence(id=7, type="personal", hours=3)
        resp = self.client.post("/api/absences", json={
            "employee_id": 10, "start_date": "2025-03-05", "end_date": "2025-03-05",
            "type": "personal", "hours": 3,
        })
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(resp.json()["hours"], 3)

    def test_create_inverted_window_422(self):
        resp = self.client.post("/api/absences", json={
            "employee_id": 10, "start_date": "2025-03-06", "end_date": "2025-03-05",
        })
        self.assertEqual(resp.status_code, 422)

    @patch("absence.router.service.create_absence")
    def test_create_overlap_409(self, mock_create):
        mock_create.side_effect = HTTPException(status_code=409, detail="absence overlaps an existing absence")
        resp = self.client.post("/api/absences", json={
            "employee_id": 10, "start_date": "2025-03-05", "end_date": "2025-03-05",
        })
        self.assertEqual(resp.status_code, 409)

    @patch("absence.router.service.update_absence")
    def test_patch_404(self, mock_update):
        mock_update.return_value = None
        resp = self.client.patch("/api/absences/5", json={"hours": 2})
        self.assertEqual(resp.status_code, 404)

    @patch("absence.router.service.update_absence")
    def test_patch_null_start_422(self, mock_update):
        resp = self.client.patch("/api/absences/5", json={"start_date": None})
        self.assertEqual(resp.status_code, 422)
        mock_update.assert_not_called()

    @patch("absence.router.service.delete_absence")
    def test_delete(self, mock_delete):
        mock_delete.return_value = True
        resp = self.client.delete("/api/absences/5")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["message"], "absence deleted")
