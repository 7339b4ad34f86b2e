from typing import List

from fastapi import APIRouter, Depends, HTTPException

from fieldtrack.core.authorization import Role, require_role
from fieldtrack.database import SessionLocal
from fieldtrack.deps.auth import require_auth
from fieldtrack.models.worker import Worker
from fieldtrack.schemas.worker import WorkerCreate, WorkerResponse

router = APIRouter(prefix="/workers", tags=["Workers"])


@router.post("", response_model=WorkerResponse)
def create_worker(payload: WorkerCreate, _role=Depends(require_role(Role.OFFICE))):
    db = SessionLocal()
    try:
        row = Worker(name=payload.name, active=True)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row
    finally:
        db.close()


@router.get("", response_model=List[WorkerResponse])
def list_workers(_user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        return db.query(Worker).filter(Worker.active.is_(True)).order_by(Worker.name.asc()).all()
    finally:
        db.close()


@router.post("/{worker_id}/deactivate", response_model=WorkerResponse)
def deactivate_worker(worker_id: int, _role=Depends(require_role(Role.OFFICE))):
    db = SessionLocal()
    try:
        row = db.get(Worker, int(worker_id))
        if row is None:
            raise HTTPException(status_code=404, detail="Worker not found")
        row.active = False
        db.commit()
        db.refresh(row)
        return row
    finally:
        db.close()
