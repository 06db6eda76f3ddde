# tests/test_services/test_teamevent_services.py
import unittest
from datetime import date

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

import models_bootstrap  # noqa: F401
from core.database import Base
from employee.models import Employee
from teamevent import service
from teamevent.schema import TeamEventCreate, TeamEventUpdate


class TeamEventServiceTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        TestingSession = sessionmaker(bind=self.engine, future=True)
        self.db: Session = TestingSession()

        e1, e2 = Employee(display_name="Kalli"), Employee(display_name="Palli")
        self.db.add_all([e1, e2])
        self.db.commit()
        self.emp1_id, self.emp2_id = e1.id, e2.id

        self.everyone = service.create_team_event(self.db, TeamEventCreate(
            name="Offsite", date=date(2025, 3, 6), hours_reduction=2,
        ))
        self.training = service.create_team_event(self.db, TeamEventCreate(
            name="Training", date=date(2025, 3, 12), hours_reduction=3, affected_employee_ids=[e2.id],
        ))

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_omitted_employees_means_everyone(self):
        self.assertTrue(self.everyone.affects_all)
        self.assertIsNone(self.everyone.affected_employee_ids)

    def test_empty_list_means_everyone(self):
        row = service.create_team_event(self.db, TeamEventCreate(
            name="Party", date=date(2025, 3, 14), hours_reduction=1, affected_employee_ids=[],
        ))
        self.assertTrue(row.affects_all)

    def test_unknown_employee_is_404(self):
        with self.assertRaises(HTTPException) as ctx:
            service.create_team_event(self.db, TeamEventCreate(
                name="x", date=date(2025, 3, 14), hours_reduction=1, affected_employee_ids=[self.emp1_id, 999],
            ))
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertIn("999", ctx.exception.detail)

    def test_reduction_required_unless_full_day(self):
        with self.assertRaises(ValidationError):
            TeamEventCreate(name="x", date=date(2025, 3, 14))
        event = TeamEventCreate(name="Holiday", date=date(2025, 3, 14), full_day=True)
        self.assertEqual(event.hours_reduction, 0)

    def test_list_by_range_and_employee(self):
        march_first_week = service.get_team_events(self.db, start=date(2025, 3, 3), end=date(2025, 3, 9))
        self.assertEqual([e.name for e in march_first_week], ["Offsite"])

        for_kalli = service.get_team_events(self.db, employee_id=self.emp1_id)
        self.assertEqual([e.name for e in for_kalli], ["Offsite"])
        for_palli = service.get_team_events(self.db, employee_id=self.emp2_id)
        self.assertEqual([e.name for e in for_palli], ["Offsite", "Training"])

    def test_update_employees(self):
        row = service.update_team_event(self.db, self.training.id, TeamEventUpdate(
            affected_employee_ids=[self.emp1_id, self.emp2_id],
        ))
        self.assertEqual(sorted(row.affected_employee_ids), [self.emp1_id, self.emp2_id])
        row = service.update_team_event(self.db, self.training.id, TeamEventUpdate(affected_employee_ids=[]))
        self.assertTrue(row.affects_all)

    def test_update_rejects_explicit_nulls(self):
        for field in ("name", "date", "hours_reduction", "full_day"):
            with self.assertRaises(ValidationError):
                TeamEventUpdate.model_validate({field: None})
        row = service.update_team_event(self.db, self.training.id,
                                        TeamEventUpdate.model_validate({"affected_employee_ids": None}))
        self.assertTrue(row.affects_all)

    def test_delete(self):
        self.assertTrue(service.delete_team_event(self.db, self.everyone.id))
        self.assertIsNone(service.get_team_event(self.db, self.everyone.id))
        self.assertFalse(service.delete_team_event(self.db, self.everyone.id))
