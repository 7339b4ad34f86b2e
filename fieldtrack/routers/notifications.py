from fastapi import APIRouter, Depends, Query

from fieldtrack.database import SessionLocal
from fieldtrack.deps.auth import require_auth
from fieldtrack.deps.errors import user_action
from fieldtrack.schemas.notification import NotificationListResponse, NotificationResponse
from fieldtrack.services.notification_service import list_job_notifications, mark_read

router = APIRouter(tags=["Notifications"])


@router.get("/jobs/{job_id}/notifications", response_model=NotificationListResponse)
def job_notifications(
    job_id: int,
    limit: int = Query(default=10, ge=1, le=100),
    _user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        rows, unread = list_job_notifications(db, job_id, limit=limit)
        return NotificationListResponse(
            unread_count=unread,
            rows=[NotificationResponse.model_validate(r) for r in rows],
        )
    finally:
        db.close()


@router.post("/notifications/{notification_id}/read", response_model=NotificationResponse)
def read_notification(notification_id: int, _user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to update notification", notification_id=notification_id):
            row = mark_read(db, notification_id)
            db.commit()
            return row
    finally:
        db.close()
