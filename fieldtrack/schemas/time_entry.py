from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from fieldtrack.services.crew import CrewMode


class PhotoPayload(BaseModel):
    filename: str
    content_base64: str
    caption: Optional[str] = None
    content_type: Optional[str] = None


class ManualEntryRequest(BaseModel):
    component_id: Optional[int] = None
    entry_date: Optional[date] = Field(default=None, description="If omitted, today (server local time).")
    hours: int = Field(default=0, ge=0)
    minutes: int = Field(default=0, ge=0, lt=60)
    mode: CrewMode = CrewMode.COUNT
    crew_count: int = Field(default=0, ge=0)
    worker_ids: List[int] = Field(default_factory=list)
    notes: Optional[str] = None
    photos: List[PhotoPayload] = Field(default_factory=list)


class TimeEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    job_id: int
    component_id: Optional[int]
    user_id: str
    start_time: datetime
    end_time: Optional[datetime]
    total_hours: float
    crew_count: int
    is_manual: bool
    is_active: bool
    notes: Optional[str]
    worker_names: List[str]


class PhotoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    time_entry_id: Optional[str]
    job_id: int
    photo_url: str
    photo_date: date
    caption: Optional[str]


class SavedEntryResponse(BaseModel):
    entry: TimeEntryResponse
    component_man_hours: float
    clock_in_man_hours: float
    photos: List[PhotoResponse] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result) -> "SavedEntryResponse":
        return cls(
            entry=TimeEntryResponse.model_validate(result.entry),
            component_man_hours=result.hours.component_man_hours,
            clock_in_man_hours=result.hours.clock_in_man_hours,
            photos=[PhotoResponse.model_validate(p) for p in result.photos],
            warnings=list(result.warnings),
        )
