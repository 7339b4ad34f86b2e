"""Turns finished timers and manual entry forms into ``time_entries`` rows.

The time entry is the authoritative write. Photos and the office notification
are follow-ups: each one commits on its own, and a failure there is logged and
reported in ``SavedEntry.warnings`` without touching the saved entry.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Callable, List, Optional, Sequence
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fieldtrack.core.errors import ValidationError
from fieldtrack.models.photo import Photo
from fieldtrack.models.time_entry import TimeEntry
from fieldtrack.services.crew import (
    CrewMode,
    ManualSource,
    TimerSource,
    active_worker_names,
    ms_to_hours,
    resolve_crew,
    round_to_quarter_hour,
)
from fieldtrack.services.job_hours import JobHours, job_hours
from fieldtrack.services.job_lookup import get_active_component, get_job
from fieldtrack.services.notification_service import create_notification, time_entry_brief
from fieldtrack.services.object_storage import LocalObjectStorage, get_object_storage
from fieldtrack.services.photo_service import PhotoUpload, store_entry_photo
from fieldtrack.services.timer_engine import TimerEngine, elapsed_ms
from fieldtrack.services.timer_store import to_utc

logger = logging.getLogger(__name__)

MANUAL_ENTRY_HOUR = time(12, 0)


@dataclass(frozen=True)
class TimerSaveForm:
    mode: CrewMode = CrewMode.COUNT
    additional_crew: int = 0
    worker_ids: Sequence[int] = ()
    notes: Optional[str] = None
    stopped_at: Optional[datetime] = None


@dataclass(frozen=True)
class ManualEntryForm:
    component_id: Optional[int]
    hours: int = 0
    minutes: int = 0
    mode: CrewMode = CrewMode.COUNT
    crew_count: int = 0
    worker_ids: Sequence[int] = ()
    notes: Optional[str] = None
    entry_date: Optional[date] = None
    photos: Sequence[PhotoUpload] = ()


@dataclass
class SavedEntry:
    entry: TimeEntry
    hours: JobHours
    photos: List[Photo] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _naive_utc(dt: datetime) -> datetime:
    return to_utc(dt).replace(tzinfo=None)


def _notify(db: Session, entry: TimeEntry, component_name: str, photo_count: int = 0) -> bool:
    brief = time_entry_brief(
        entry.total_hours,
        component_name,
        entry.crew_count,
        manual=bool(entry.is_manual),
        photo_count=photo_count,
    )
    row = create_notification(
        db,
        job_id=entry.job_id,
        created_by=entry.user_id,
        type="time_entry",
        brief=brief,
        reference_id=entry.id,
        reference_data={
            "component_id": entry.component_id,
            "total_hours": entry.total_hours,
            "crew_count": entry.crew_count,
            "is_manual": bool(entry.is_manual),
            "photo_count": photo_count,
        },
    )
    return row is not None


def save_timer_entry(
    db: Session,
    engine: TimerEngine,
    job_id: int,
    timer_id: str,
    form: TimerSaveForm,
    *,
    on_timer_update: Optional[Callable[[], None]] = None,
) -> SavedEntry:
    """Persist a reviewed timer and drop it from the timer store.

    Elapsed time is taken as of ``form.stopped_at`` (the review's freeze point,
    never later than now). If the write fails the timer stays stored.
    """
    timer = engine.get(job_id, timer_id)

    now = engine.now()
    stopped_at = now if form.stopped_at is None else min(to_utc(form.stopped_at), now)
    final_ms = elapsed_ms(timer, stopped_at)

    crew = resolve_crew(
        TimerSource(
            mode=CrewMode(form.mode),
            additional_crew=int(form.additional_crew),
            worker_ids=tuple(form.worker_ids),
        ),
        active_worker_names(db),
    )
    total_hours = round_to_quarter_hour(ms_to_hours(final_ms))

    entry = TimeEntry(
        id=str(uuid4()),
        job_id=int(job_id),
        component_id=timer.component_id,
        user_id=engine.user_id,
        start_time=_naive_utc(timer.start_time),
        end_time=_naive_utc(stopped_at),
        total_hours=total_hours,
        crew_count=crew.count,
        is_manual=False,
        is_active=False,
        notes=form.notes or None,
        worker_names=crew.names,
    )

    try:
        db.add(entry)
        db.flush()
        engine.complete(job_id, timer_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Timer time entry saved",
        extra={
            "time_entry_id": entry.id,
            "timer_id": timer_id,
            "job_id": job_id,
            "total_hours": total_hours,
            "crew_count": crew.count,
        },
    )

    result = SavedEntry(entry=entry, hours=job_hours(db, job_id))
    if not _notify(db, entry, timer.component_name):
        result.warnings.append("Time entry saved but the office notification could not be sent")

    if on_timer_update is not None:
        on_timer_update()
    return result


def create_manual_entry(
    db: Session,
    *,
    job_id: int,
    user_id: str,
    form: ManualEntryForm,
    storage: Optional[LocalObjectStorage] = None,
    today: Optional[date] = None,
) -> SavedEntry:
    if not form.component_id:
        raise ValidationError("Please select a component")
    if form.hours < 0 or form.minutes < 0:
        raise ValidationError("Please enter valid time")

    # under 8 minutes rounds to 0h
    total_hours = round_to_quarter_hour(int(form.hours) + int(form.minutes) / 60)
    if total_hours <= 0:
        raise ValidationError("Please enter valid time")

    mode = CrewMode(form.mode)
    if mode == CrewMode.WORKERS and len(form.worker_ids) == 0:
        raise ValidationError("Please select at least one worker")

    get_job(db, job_id)
    component = get_active_component(db, job_id, form.component_id)

    crew = resolve_crew(
        ManualSource(mode=mode, crew_count=int(form.crew_count), worker_ids=tuple(form.worker_ids)),
        active_worker_names(db),
    )
    if mode == CrewMode.WORKERS and not crew.names:
        raise ValidationError("Please select at least one worker")

    entry_date = form.entry_date or today or date.today()
    midday = datetime.combine(entry_date, MANUAL_ENTRY_HOUR)

    entry = TimeEntry(
        id=str(uuid4()),
        job_id=int(job_id),
        component_id=component.id,
        user_id=str(user_id),
        start_time=midday,
        end_time=midday,
        total_hours=total_hours,
        crew_count=crew.count,
        is_manual=True,
        is_active=False,
        notes=form.notes or None,
        worker_names=crew.names,
    )

    try:
        db.add(entry)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Manual time entry saved",
        extra={
            "time_entry_id": entry.id,
            "job_id": job_id,
            "total_hours": entry.total_hours,
            "crew_count": crew.count,
            "photo_count": len(form.photos),
        },
    )

    result = SavedEntry(entry=entry, hours=JobHours(0.0, 0.0))

    if form.photos:
        storage = storage or get_object_storage()
        for upload in form.photos:
            try:
                photo = store_entry_photo(
                    db,
                    storage,
                    upload,
                    job_id=job_id,
                    time_entry_id=entry.id,
                    component_id=component.id,
                    photo_date=entry_date,
                    uploaded_by=user_id,
                )
                db.commit()
            except (OSError, ValueError, SQLAlchemyError):
                db.rollback()
                logger.exception(
                    "Photo upload failed",
                    extra={"time_entry_id": entry.id, "job_id": job_id, "photo_filename": upload.filename},
                )
                result.warnings.append(f"Photo {upload.filename} could not be uploaded")
                continue
            result.photos.append(photo)

    if not _notify(db, entry, component.name, photo_count=len(result.photos)):
        result.warnings.append("Time entry saved but the office notification could not be sent")

    result.hours = job_hours(db, job_id)
    return result


def list_job_entries(
    db: Session,
    job_id: int,
    *,
    component_id: Optional[int] = None,
    is_manual: Optional[bool] = None,
    limit: int = 50,
    offset: int = 0,
) -> List[TimeEntry]:
    q = db.query(TimeEntry).filter(TimeEntry.job_id == int(job_id))
    if component_id is not None:
        q = q.filter(TimeEntry.component_id == int(component_id))
    if is_manual is not None:
        q = q.filter(TimeEntry.is_manual.is_(bool(is_manual)))
    return (
        q.order_by(TimeEntry.start_time.desc(), TimeEntry.created_at.desc())
        .offset(int(offset))
        .limit(int(limit))
        .all()
    )
