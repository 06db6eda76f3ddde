# tests/test_services/test_absence_services.py
import unittest
from datetime import date

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

import models_bootstrap  # noqa: F401
from core.database import Base
from absence import service
from absence.models import Absence, AbsenceType
from absence.schema import AbsenceCreate, AbsenceUpdate
from employee.models import Employee


class AbsenceServiceTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        TestingSession = sessionmaker(bind=self.engine, future=True)
        self.db: Session = TestingSession()

        e1, e2 = Employee(display_name="Kalli"), Employee(display_name="Palli")
        self.db.add_all([e1, e2])
        self.db.flush()
        self.emp1_id, self.emp2_id = e1.id, e2.id

        a1 = Absence(employee_id=e1.id, start_date=date(2025, 3, 3), end_date=date(2025, 3, 7),
                     type=AbsenceType.vacation)
        a2 = Absence(employee_id=e2.id, start_date=date(2025, 3, 5), end_date=date(2025, 3, 5),
                     type=AbsenceType.personal, hours=3)
        self.db.add_all([a1, a2])
        self.db.commit()
        self.a1_id, self.a2_id = a1.id, a2.id

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_list_for_employee(self):
        rows = service.get_absences(self.db, employee_id=self.emp1_id)
        self.assertEqual([r.id for r in rows], [self.a1_id])

    def test_list_overlapping_window(self):
        rows = service.get_absences(self.db, overlaps_start=date(2025, 3, 7), overlaps_end=date(2025, 3, 9))
        self.assertEqual([r.id for r in rows], [self.a1_id])
        rows = service.get_absences(self.db, overlaps_start=date(2025, 3, 10), overlaps_end=date(2025, 3, 16))
        self.assertEqual(rows, [])

    def test_create_partial_day(self):
        row = service.create_absence(self.db, AbsenceCreate(
            employee_id=self.emp1_id, start_date=date(2025, 3, 10), end_date=date(2025, 3, 10),
            type=AbsenceType.sick, hours=4,
        ))
        self.assertEqual(row.hours, 4)
        self.assertEqual(row.type, AbsenceType.sick)

    def test_create_overlapping_is_409(self):
        with self.assertRaises(HTTPException) as ctx:
            service.create_absence(self.db, AbsenceCreate(
                employee_id=self.emp1_id, start_date=date(2025, 3, 7), end_date=date(2025, 3, 11),
            ))
        self.assertEqual(ctx.exception.status_code, 409)

    def test_overlap_is_per_employee(self):
        row = service.create_absence(self.db, AbsenceCreate(
            employee_id=self.emp2_id, start_date=date(2025, 3, 3), end_date=date(2025, 3, 4),
        ))
        self.assertIsNotNone(row.id)

    def test_unknown_employee_404(self):
        with self.assertRaises(HTTPException) as ctx:
            service.create_absence(self.db, AbsenceCreate(
                employee_id=999, start_date=date(2025, 3, 3), end_date=date(2025, 3, 3),
            ))
        self.assertEqual(ctx.exception.status_code, 404)

    def test_payload_window_and_hours_validation(self):
        with self.assertRaises(ValidationError):
            AbsenceCreate(employee_id=1, start_date=date(2025, 3, 4), end_date=date(2025, 3, 3))
        with self.assertRaises(ValidationError):
            AbsenceCreate(employee_id=1, start_date=date(2025, 3, 3), end_date=date(2025, 3, 3), hours=25)

    def test_update_can_extend_own_window(self):
        row = service.update_absence(self.db, self.a1_id, AbsenceUpdate(end_date=date(2025, 3, 10)))
        self.assertEqual(row.end_date, date(2025, 3, 10))

    def test_update_rejects_inverted_window(self):
        with self.assertRaises(HTTPException) as ctx:
            service.update_absence(self.db, self.a1_id, AbsenceUpdate(end_date=date(2025, 3, 1)))
        self.assertEqual(ctx.exception.status_code, 422)

    def test_update_rejects_explicit_nulls(self):
        for field in ("start_date", "end_date", "type", "hours"):
            with self.assertRaises(ValidationError):
                AbsenceUpdate.model_validate({field: None})
        # a null description clears it
        row = service.update_absence(self.db, self.a1_id, AbsenceUpdate.model_validate({"description": None}))
        self.assertIsNone(row.description)
        self.assertEqual(row.start_date, date(2025, 3, 3))

    def test_update_rejects_overlap(self):
        service.create_absence(self.db, AbsenceCreate(
            employee_id=self.emp1_id, start_date=date(2025, 3, 17), end_date=date(2025, 3, 18),
        ))
        with self.assertRaises(HTTPException) as ctx:
            service.update_absence(self.db, self.a1_id, AbsenceUpdate(end_date=date(2025, 3, 17)))
        self.assertEqual(ctx.exception.status_code, 409)

    def test_delete(self):
        self.assertTrue(service.delete_absence(self.db, self.a2_id))
        self.assertFalse(service.delete_absence(self.db, self.a2_id))
