import time
from dataclasses import dataclass
from datetime import date
from typing import Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from fieldtrack.models.photo import Photo
from fieldtrack.services.object_storage import JOB_FILES_BUCKET, LocalObjectStorage


@dataclass(frozen=True)
class PhotoUpload:
    filename: str
    content: bytes
    caption: Optional[str] = None
    content_type: Optional[str] = None


def photo_object_path(job_id: int, filename: str, now_ms: Optional[int] = None) -> str:
    """``<job_id>/<epoch_ms>_<random>.<ext>``"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    ext = "jpg"
    if "." in filename:
        candidate = filename.rsplit(".", 1)[1].strip().lower()
        if candidate.isalnum():
            ext = candidate
    return f"{int(job_id)}/{now_ms}_{uuid4().hex[:8]}.{ext}"


def store_entry_photo(
    db: Session,
    storage: LocalObjectStorage,
    upload: PhotoUpload,
    *,
    job_id: int,
    time_entry_id: str,
    component_id: Optional[int],
    photo_date: date,
    uploaded_by: str,
) -> Photo:
    """Upload one photo blob and add its ``photos`` row. The caller commits."""
    path = photo_object_path(job_id, upload.filename)
    storage.upload(JOB_FILES_BUCKET, path, upload.content, upload.content_type)

    row = Photo(
        time_entry_id=time_entry_id,
        component_id=component_id,
        job_id=int(job_id),
        photo_url=storage.get_public_url(JOB_FILES_BUCKET, path),
        photo_date=photo_date,
        uploaded_by=str(uploaded_by),
        caption=upload.caption or None,
    )
    db.add(row)
    db.flush()
    return row
