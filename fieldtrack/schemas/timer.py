from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from fieldtrack.schemas.time_entry import SavedEntryResponse
from fieldtrack.services.crew import CrewMode


class TimerStartRequest(BaseModel):
    component_id: Optional[int] = None
    mode: CrewMode = CrewMode.COUNT
    additional_crew: int = Field(default=0, ge=0)
    worker_ids: List[int] = Field(default_factory=list)


class TimerSaveRequest(BaseModel):
    mode: CrewMode = CrewMode.COUNT
    additional_crew: int = Field(default=0, ge=0)
    worker_ids: List[int] = Field(default_factory=list)
    notes: Optional[str] = None
    stopped_at: Optional[datetime] = Field(
        default=None,
        description="Freeze point returned by /stop. If omitted, server uses current UTC time.",
    )


class TimerResponse(BaseModel):
    id: str
    job_id: int
    component_id: int
    component_name: str
    state: str
    start_time: datetime
    pause_time: Optional[datetime]
    total_elapsed_ms: int
    crew_count: int
    worker_names: List[str]
    elapsed_ms: int
    display: str
    hours_decimal: str


class TimerReviewResponse(BaseModel):
    timer: TimerResponse
    stopped_at: datetime
    elapsed_ms: int
    display: str
    rounded_hours: float
    mode: CrewMode
    additional_crew: int
    worker_names: List[str]


class TimerSaveResponse(SavedEntryResponse):
    pass
