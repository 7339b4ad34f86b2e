import base64
import binascii
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from fieldtrack.database import SessionLocal
from fieldtrack.deps.auth import require_auth
from fieldtrack.deps.errors import user_action
from fieldtrack.schemas.time_entry import ManualEntryRequest, SavedEntryResponse, TimeEntryResponse
from fieldtrack.services.job_lookup import get_job
from fieldtrack.services.photo_service import PhotoUpload
from fieldtrack.services.time_entry_service import ManualEntryForm, create_manual_entry, list_job_entries

router = APIRouter(prefix="/jobs/{job_id}/time_entries", tags=["Time Entries"])


def _decode_photos(payload: ManualEntryRequest) -> List[PhotoUpload]:
    uploads = []
    for photo in payload.photos:
        try:
            content = base64.b64decode(photo.content_base64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise HTTPException(status_code=400, detail=f"Invalid photo data: {photo.filename}") from exc
        uploads.append(
            PhotoUpload(
                filename=photo.filename,
                content=content,
                caption=photo.caption,
                content_type=photo.content_type,
            )
        )
    return uploads


@router.get("", response_model=List[TimeEntryResponse])
def list_time_entries(
    job_id: int,
    component_id: Optional[int] = None,
    is_manual: Optional[bool] = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    _user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to load time entries", job_id=job_id):
            get_job(db, job_id)
            return list_job_entries(
                db,
                job_id,
                component_id=component_id,
                is_manual=is_manual,
                limit=limit,
                offset=offset,
            )
    finally:
        db.close()


@router.post("/manual", response_model=SavedEntryResponse)
def create_manual_time_entry(
    job_id: int,
    payload: ManualEntryRequest,
    user_id: str = Depends(require_auth),
):
    photos = _decode_photos(payload)

    db = SessionLocal()
    try:
        with user_action(db, "Failed to save manual entry", job_id=job_id, user_id=user_id):
            result = create_manual_entry(
                db,
                job_id=job_id,
                user_id=user_id,
                form=ManualEntryForm(
                    component_id=payload.component_id,
                    hours=payload.hours,
                    minutes=payload.minutes,
                    mode=payload.mode,
                    crew_count=payload.crew_count,
                    worker_ids=tuple(payload.worker_ids),
                    notes=payload.notes,
                    entry_date=payload.entry_date,
                    photos=tuple(photos),
                ),
            )
            return SavedEntryResponse.from_result(result)
    finally:
        db.close()
