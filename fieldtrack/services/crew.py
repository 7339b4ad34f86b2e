"""Crew-size resolution shared by the timer and manual entry flows.

The two flows capture crew the same way but count it differently:

* timer-sourced entries always add one for the person running the timer;
* manual entries never do, in either mode.

That asymmetry lives only in ``resolve_crew``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Sequence, Tuple, Union

from sqlalchemy.orm import Session

from fieldtrack.core.errors import ValidationError
from fieldtrack.models.worker import Worker


class CrewMode(str, Enum):
    COUNT = "count"
    WORKERS = "workers"


@dataclass(frozen=True)
class TimerSource:
    mode: CrewMode
    additional_crew: int = 0
    worker_ids: Tuple[int, ...] = ()


@dataclass(frozen=True)
class ManualSource:
    mode: CrewMode
    crew_count: int = 0
    worker_ids: Tuple[int, ...] = ()


EntrySource = Union[TimerSource, ManualSource]


@dataclass(frozen=True)
class CrewResolution:
    count: int
    names: List[str]


def active_worker_names(db: Session) -> dict:
    rows = db.query(Worker).filter(Worker.active.is_(True)).order_by(Worker.name.asc()).all()
    return {int(w.id): w.name for w in rows}


def worker_names_for(worker_ids: Sequence[int], workers: Mapping[int, str]) -> List[str]:
    # Unknown or inactive ids are dropped, selection order kept.
    return [workers[int(i)] for i in worker_ids if int(i) in workers]


def resolve_crew(source: EntrySource, workers: Mapping[int, str]) -> CrewResolution:
    if isinstance(source, TimerSource):
        if source.mode == CrewMode.WORKERS:
            names = worker_names_for(source.worker_ids, workers)
            return CrewResolution(count=len(names) + 1, names=names)

        if source.additional_crew < 0:
            raise ValidationError("Additional crew cannot be negative")
        return CrewResolution(count=int(source.additional_crew) + 1, names=[])

    if isinstance(source, ManualSource):
        if source.mode == CrewMode.WORKERS:
            names = worker_names_for(source.worker_ids, workers)
            return CrewResolution(count=len(names), names=names)

        if source.crew_count < 0:
            raise ValidationError("Crew count cannot be negative")
        return CrewResolution(count=int(source.crew_count), names=[])

    raise TypeError(f"Unsupported entry source: {type(source).__name__}")


def round_to_quarter_hour(hours: float) -> float:
    """Nearest 0.25h, halves rounding up."""
    return math.floor(hours * 4 + 0.5) / 4


def ms_to_hours(elapsed_ms: int) -> float:
    return elapsed_ms / 3_600_000
