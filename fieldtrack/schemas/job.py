from datetime import datetime

from pydantic import BaseModel, ConfigDict


class JobCreate(BaseModel):
    name: str


class JobResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    is_active: bool
    created_at: datetime


class ComponentCreate(BaseModel):
    name: str


class ComponentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: int
    name: str
    is_active: bool
    created_at: datetime


class JobHoursResponse(BaseModel):
    component_man_hours: float
    clock_in_man_hours: float
