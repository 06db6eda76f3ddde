from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class EmployeeSchema(BaseModel):
    id: int
    display_name: str
    role: Optional[str] = None
    monday: float
    tuesday: float
    wednesday: float
    thursday: float
    friday: float
    saturday: float
    sunday: float
    default_weekly_capacity: float
    is_active: bool
    is_planner: bool
    model_config = ConfigDict(from_attributes=True)

# PUBLIC payload, what clients send
class EmployeeCreatePayload(BaseModel):
    display_name: str
    role: Optional[str] = None
    monday: float = Field(8.0, ge=0, le=24)
    tuesday: float = Field(8.0, ge=0, le=24)
    wednesday: float = Field(8.0, ge=0, le=24)
    thursday: float = Field(8.0, ge=0, le=24)
    friday: float = Field(8.0, ge=0, le=24)
    saturday: float = Field(0.0, ge=0, le=24)
    sunday: float = Field(0.0, ge=0, le=24)
    is_planner: bool = False
    model_config = ConfigDict(extra="forbid")


# INTERNAL DTO for the service
class EmployeeCreate(EmployeeCreatePayload):
    model_config = ConfigDict(extra="ignore")


class EmployeeUpdate(BaseModel):
    display_name: Optional[str] = None
    role: Optional[str] = None
    monday: Optional[float] = Field(None, ge=0, le=24)
    tuesday: Optional[float] = Field(None, ge=0, le=24)
    wednesday: Optional[float] = Field(None, ge=0, le=24)
    thursday: Optional[float] = Field(None, ge=0, le=24)
    friday: Optional[float] = Field(None, ge=0, le=24)
    saturday: Optional[float] = Field(None, ge=0, le=24)
    sunday: Optional[float] = Field(None, ge=0, le=24)
    is_active: Optional[bool] = None
    is_planner: Optional[bool] = None
