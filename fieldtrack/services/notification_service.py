import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fieldtrack.core.errors import NotFoundError
from fieldtrack.models.notification import Notification

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = {
    "daily_log",
    "photos",
    "material_request",
    "issue",
    "note",
    "material_status",
    "document_revision",
    "task_completed",
    "time_entry",
}


def create_notification(
    db: Session,
    *,
    job_id: int,
    created_by: str,
    type: str,
    brief: str,
    reference_id: Optional[str] = None,
    reference_data: Optional[Dict[str, Any]] = None,
) -> Optional[Notification]:
    """Commit a notification for office staff.

    Failures are logged and rolled back; the caller's own work is never undone
    because of a notification. Returns None when nothing was stored.
    """
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {type}")

    try:
        row = Notification(
            job_id=int(job_id),
            created_by=str(created_by),
            type=type,
            brief=brief,
            reference_id=reference_id,
            reference_data=reference_data,
            is_read=False,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Failed to create notification",
            extra={"job_id": job_id, "type": type, "reference_id": reference_id},
        )
        return None

    logger.info("Notification created", extra={"job_id": job_id, "type": type, "brief": brief})
    return row


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def time_entry_brief(
    hours: float,
    component_name: str,
    crew_count: int,
    *,
    manual: bool = False,
    photo_count: int = 0,
) -> str:
    brief = f"{hours:.2f}h on {component_name or 'Unknown component'} ({crew_count} crew)"
    if manual:
        brief = f"Manual entry: {brief}"
    if photo_count > 0:
        brief += f" + {_plural(photo_count, 'photo')}"
    return brief


def list_job_notifications(db: Session, job_id: int, limit: int = 10) -> Tuple[List[Notification], int]:
    rows = (
        db.query(Notification)
        .filter(Notification.job_id == int(job_id))
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(int(limit))
        .all()
    )
    unread = sum(1 for r in rows if not r.is_read)
    return rows, unread


def mark_read(db: Session, notification_id: int) -> Notification:
    row = db.get(Notification, int(notification_id))
    if row is None:
        raise NotFoundError("Notification not found")
    row.is_read = True
    db.flush()
    return row
