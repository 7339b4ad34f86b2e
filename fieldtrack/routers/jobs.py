from typing import List

from fastapi import APIRouter, Depends

from fieldtrack.core.authorization import Role, require_role
from fieldtrack.database import SessionLocal
from fieldtrack.deps.auth import require_auth
from fieldtrack.deps.errors import user_action
from fieldtrack.models.component import Component
from fieldtrack.models.job import Job
from fieldtrack.schemas.job import (
    ComponentCreate,
    ComponentResponse,
    JobCreate,
    JobHoursResponse,
    JobResponse,
)
from fieldtrack.services.job_hours import job_hours
from fieldtrack.services.job_lookup import get_job

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", response_model=JobResponse)
def create_job(payload: JobCreate, _role=Depends(require_role(Role.OFFICE))):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to create job"):
            row = Job(name=payload.name, is_active=True)
            db.add(row)
            db.commit()
            db.refresh(row)
            return row
    finally:
        db.close()


@router.get("", response_model=List[JobResponse])
def list_jobs(_user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        return db.query(Job).filter(Job.is_active.is_(True)).order_by(Job.id.asc()).all()
    finally:
        db.close()


@router.get("/{job_id}", response_model=JobResponse)
def get_job_endpoint(job_id: int, _user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to load job", job_id=job_id):
            return get_job(db, job_id)
    finally:
        db.close()


@router.post("/{job_id}/components", response_model=ComponentResponse)
def create_component(
    job_id: int,
    payload: ComponentCreate,
    _role=Depends(require_role(Role.OFFICE)),
):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to create component", job_id=job_id):
            get_job(db, job_id)
            row = Component(job_id=job_id, name=payload.name, is_active=True)
            db.add(row)
            db.commit()
            db.refresh(row)
            return row
    finally:
        db.close()


@router.get("/{job_id}/components", response_model=List[ComponentResponse])
def list_components(job_id: int, _user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        return (
            db.query(Component)
            .filter(Component.job_id == int(job_id), Component.is_active.is_(True))
            .order_by(Component.name.asc())
            .all()
        )
    finally:
        db.close()


@router.get("/{job_id}/hours", response_model=JobHoursResponse)
def get_job_hours(job_id: int, _user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to load job hours", job_id=job_id):
            get_job(db, job_id)
            hours = job_hours(db, job_id)
            return JobHoursResponse(
                component_man_hours=hours.component_man_hours,
                clock_in_man_hours=hours.clock_in_man_hours,
            )
    finally:
        db.close()
