from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: int
    created_by: str
    type: str
    brief: str
    reference_id: Optional[str]
    reference_data: Optional[Any]
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    unread_count: int
    rows: List[NotificationResponse]
