from __future__ import annotations
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from core.database import get_db
from employee.models import Employee

# Session management lives outside this service; the gateway in front of it
# forwards the authenticated employee id in this header.
EMPLOYEE_HEADER = "X-Employee-Id"


def get_current_active_user(
    x_employee_id: Optional[int] = Header(None, alias=EMPLOYEE_HEADER),
    db: Session = Depends(get_db),
) -> Employee:
    if x_employee_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="not authenticated")
    user = db.get(Employee, x_employee_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="inactive or unknown employee")
    return user
