from dataclasses import dataclass

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from fieldtrack.models.time_entry import TimeEntry


@dataclass(frozen=True)
class JobHours:
    component_man_hours: float
    clock_in_man_hours: float


def job_hours(db: Session, job_id: int) -> JobHours:
    """Man-hours (hours x crew) split by whether the entry names a component."""
    # a missing or zero crew count counts as one person
    crew = case((func.coalesce(TimeEntry.crew_count, 0) > 0, TimeEntry.crew_count), else_=1)
    man_hours = func.coalesce(TimeEntry.total_hours, 0) * crew

    component_total, clock_in_total = (
        db.query(
            func.coalesce(func.sum(case((TimeEntry.component_id.isnot(None), man_hours), else_=0)), 0),
            func.coalesce(func.sum(case((TimeEntry.component_id.is_(None), man_hours), else_=0)), 0),
        )
        .filter(TimeEntry.job_id == int(job_id))
        .one()
    )
    return JobHours(
        component_man_hours=float(component_total),
        clock_in_man_hours=float(clock_in_total),
    )
