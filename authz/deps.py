from fastapi import Depends, HTTPException
from auth.services.auth_service import get_current_active_user
from employee.models import Employee

def require_planner(user: Employee = Depends(get_current_active_user)) -> int:
    if not user.is_planner:
        raise HTTPException(status_code=403, detail="Planner role required")
    return user.id
