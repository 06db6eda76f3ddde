# tests/test_services/test_employee_services.py
import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

import models_bootstrap  # noqa: F401
from core.database import Base
from employee import service
from employee.models import Employee
from employee.schema import EmployeeCreate, EmployeeUpdate


class EmployeeServiceTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        TestingSession = sessionmaker(bind=self.engine, future=True)
        self.db: Session = TestingSession()

        self.db.add_all([
            Employee(display_name="Palli"),
            Employee(display_name="Anna", friday=4.0),
            Employee(display_name="Old timer", is_active=False),
        ])
        self.db.commit()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_get_employees_sorted_by_name(self):
        names = [e.display_name for e in service.get_employees(self.db)]
        self.assertEqual(names, ["Anna", "Old timer", "Palli"])

    def test_get_employees_active_only(self):
        names = [e.display_name for e in service.get_employees(self.db, active_only=True)]
        self.assertEqual(names, ["Anna", "Palli"])

    def test_create_employee_defaults_to_full_time(self):
        emp = service.create_employee(self.db, EmployeeCreate(display_name="Nýr"))
        self.assertIsNotNone(emp.id)
        self.assertEqual(emp.default_weekly_capacity, 40.0)
        self.assertEqual(emp.saturday, 0.0)
        self.assertFalse(emp.is_planner)

    def test_custom_schedule_capacity(self):
        anna = service.get_employees(self.db)[0]
        self.assertEqual(anna.default_weekly_capacity, 36.0)

    def test_update_employee_schedule(self):
        anna = service.get_employees(self.db)[0]
        updated = service.update_employee(self.db, anna.id, EmployeeUpdate(monday=0, is_planner=True))
        self.assertEqual(updated.monday, 0)
        self.assertTrue(updated.is_planner)
        self.assertEqual(updated.default_weekly_capacity, 28.0)

    def test_update_missing_employee(self):
        self.assertIsNone(service.update_employee(self.db, 999, EmployeeUpdate(role="x")))

    def test_delete_employee(self):
        anna = service.get_employees(self.db)[0]
        self.assertTrue(service.delete_employee(self.db, anna.id))
        self.assertIsNone(service.get_employee(self.db, anna.id))
        self.assertFalse(service.delete_employee(self.db, anna.id))
