from sqlalchemy.orm import Session

from fieldtrack.core.errors import NotFoundError
from fieldtrack.models.component import Component
from fieldtrack.models.job import Job


def get_job(db: Session, job_id: int) -> Job:
    row = db.get(Job, int(job_id))
    if row is None:
        raise NotFoundError("Job not found")
    return row


def get_active_component(db: Session, job_id: int, component_id: int) -> Component:
    row = (
        db.query(Component)
        .filter(
            Component.id == int(component_id),
            Component.job_id == int(job_id),
            Component.is_active.is_(True),
        )
        .first()
    )
    if row is None:
        raise NotFoundError("Component not found")
    return row
