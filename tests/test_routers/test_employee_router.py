import unittest
from types import SimpleNamespace as Obj
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from main import app
from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_planner


def _employee(**kw):
    row = dict(id=1, display_name="Anna", role="Designer", monday=8.0, tuesday=8.0, wednesday=8.0,
               thursday=8.0, friday=8.0, saturday=0.0, sunday=0.0, default_weekly_capacity=40.0,
               is_active=True, is_planner=False)
    row.update(kw)
    return Obj(**row)


class EmployeeRouterTests(unittest.TestCase):
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

    @patch("employee.router.service.get_employees")
    def test_list(self, mock_list):
        mock_list.return_value = [_employee(), _employee(id=2, display_name="Bjarni")]
        resp = self.client.get("/api/employees?active_only=true")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual([e["display_name"] for e in resp.json()], ["Anna", "Bjarni"])
        self.assertTrue(mock_list.call_args.kwargs["active_only"])

    @patch("employee.router.service.get_employee")
    def test_get_404(self, mock_get):
        mock_get.return_value = None
        resp = self.client.get("/api/employees/9")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "employee not found")

    @patch("employee.router.service.create_employee")
    def test_create_201(self, mock_create):
        mock_create.return_value = _employee(id=7, display_name="Nýr", friday=4.0, default_weekly_capacity=36.0)
        resp = self.client.post("/api/employees", json={"display_name": "Nýr", "friday": 4})
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(resp.json()["default_weekly_capacity"], 36.0)

    def test_create_rejects_impossible_day(self):
        resp = self.client.post("/api/employees", json={"display_name": "x", "monday": 25})
        self.assertEqual(resp.status_code, 422)

    def test_create_rejects_unknown_fields(self):
        resp = self.client.post("/api/employees", json={"display_name": "x", "org_id": 1})
        self.assertEqual(resp.status_code, 422)

    @patch("employee.router.service.create_employee")
    def test_create_duplicate_409(self, mock_create):
        mock_create.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        resp = self.client.post("/api/employees", json={"display_name": "Anna"})
        self.assertEqual(resp.status_code, 409)

    @patch("employee.router.service.update_employee")
    @patch("employee.router.service.get_employee")
    def test_patch(self, mock_get, mock_update):
        mock_get.return_value = _employee()
        mock_update.return_value = _employee(is_planner=True)
        resp = self.client.patch("/api/employees/1", json={"is_planner": True})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertTrue(resp.json()["is_planner"])

    @patch("employee.router.service.delete_employee")
    def test_delete_404(self, mock_delete):
        mock_delete.return_value = False
        self.assertEqual(self.client.delete("/api/employees/1").status_code, 404)


class PlannerGuardTests(unittest.TestCase):
    def setUp(self):
        class FakeDB:
            def rollback(self): pass
        def _fake_db():
            yield FakeDB()

        app.dependency_overrides[get_db] = _fake_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_current_active_user, None)

    def test_non_planner_forbidden(self):
        app.dependency_overrides[get_current_active_user] = lambda: Obj(id=3, is_planner=False)
        resp = self.client.post("/api/employees", json={"display_name": "x"})
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["detail"], "Planner role required")

    def test_missing_identity_401(self):
        resp = self.client.get("/api/employees")
        self.assertEqual(resp.status_code, 401)
