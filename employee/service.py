from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import select
from .models import Employee
from .schema import EmployeeCreate, EmployeeUpdate

def get_employees(db: Session, *, active_only: bool = False) -> List[Employee]:
    statement = select(Employee)
    if active_only:
        statement = statement.where(Employee.is_active.is_(True))
    statement = statement.order_by(Employee.display_name.asc())
    return list(db.scalars(statement))

def get_employee(db: Session, employee_id: int) -> Optional[Employee]:
    return db.get(Employee, employee_id)

def create_employee(db: Session, employee: EmployeeCreate) -> Employee:
    db_employee = Employee(**employee.model_dump())
    db.add(db_employee)
    db.commit()
    db.refresh(db_employee)
    return db_employee

def update_employee(db: Session, employee_id: int, patch: EmployeeUpdate) -> Optional[Employee]:
    # schedule edits only affect computations made after the commit
    db_employee = db.get(Employee, employee_id)
    if not db_employee:
        return None
    data = patch.model_dump(exclude_unset=True)
    for k,v in data.items():
        setattr(db_employee, k, v)
    db.commit()
    db.refresh(db_employee)
    return db_employee

def delete_employee(db: Session, employee_id: int) -> bool:
    db_employee = db.get(Employee, employee_id)
    if not db_employee:
        return False
    db.delete(db_employee)
    db.commit()
    return True
