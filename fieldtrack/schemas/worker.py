from datetime import datetime

from pydantic import BaseModel, ConfigDict


class WorkerCreate(BaseModel):
    name: str


class WorkerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    active: bool
    created_at: datetime
