from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, List, Optional
from uuid import uuid4

from fieldtrack.core.errors import NotFoundError, TimerStateError, ValidationError
from fieldtrack.services.crew import (
    CrewMode,
    CrewResolution,
    ms_to_hours,
    round_to_quarter_hour,
)
from fieldtrack.services.timer_store import PAUSED, RUNNING, LocalTimer, TimerStore, to_utc

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _ms_between(start: datetime, end: datetime) -> int:
    delta = to_utc(end) - to_utc(start)
    return max(0, int(delta.total_seconds() * 1000))


def elapsed_ms(timer: LocalTimer, now: datetime) -> int:
    """Completed intervals plus the live one while running."""
    total = int(timer.total_elapsed_ms)
    if timer.state == RUNNING and timer.pause_time is None:
        total += _ms_between(timer.start_time, now)
    return total


def format_elapsed(ms: int) -> str:
    total_seconds = int(ms) // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_hours_decimal(ms: int) -> str:
    return f"{ms_to_hours(ms):.2f}"


@dataclass(frozen=True)
class TimerReview:
    timer: LocalTimer
    stopped_at: datetime
    elapsed_ms: int
    mode: CrewMode
    additional_crew: int
    worker_names: List[str] = field(default_factory=list)

    @property
    def rounded_hours(self) -> float:
        return round_to_quarter_hour(ms_to_hours(self.elapsed_ms))


class TimerEngine:
    """Start/pause/resume/stop for one user's timers.

    Every operation reads the job's timers from the store and writes back the
    full set for that job. A failing write leaves the stored set as it was.
    """

    def __init__(self, store: TimerStore, *, clock: Optional[Clock] = None) -> None:
        self.store = store
        self.clock = clock or _utcnow

    @property
    def user_id(self) -> str:
        return self.store.user_id

    def now(self) -> datetime:
        return to_utc(self.clock())

    def timers(self, job_id: int) -> List[LocalTimer]:
        return self.store.load_for_job(job_id)

    def get(self, job_id: int, timer_id: str) -> LocalTimer:
        for timer in self.timers(job_id):
            if timer.id == timer_id:
                return timer
        raise NotFoundError("Timer not found")

    def start(
        self,
        job_id: int,
        component_id: Optional[int],
        component_name: str,
        crew: CrewResolution,
    ) -> LocalTimer:
        if not component_id:
            raise ValidationError("Please select a component")

        timers = self.timers(job_id)
        timer = LocalTimer(
            id=str(uuid4()),
            job_id=job_id,
            component_id=component_id,
            component_name=component_name,
            start_time=self.now(),
            pause_time=None,
            total_elapsed_ms=0,
            crew_count=crew.count,
            state=RUNNING,
            worker_names=list(crew.names),
        )
        self.store.save_for_job(job_id, timers + [timer])

        logger.info(
            "Timer started",
            extra={"timer_id": timer.id, "job_id": job_id, "component_id": component_id, "user_id": self.user_id},
        )
        return timer

    def _replace(self, job_id: int, timer_id: str, update: Callable[[LocalTimer], LocalTimer]) -> LocalTimer:
        timers = self.timers(job_id)
        for idx, timer in enumerate(timers):
            if timer.id == timer_id:
                updated = update(timer)
                self.store.save_for_job(job_id, timers[:idx] + [updated] + timers[idx + 1:])
                return updated
        raise NotFoundError("Timer not found")

    def pause(self, job_id: int, timer_id: str) -> LocalTimer:
        def _pause(timer: LocalTimer) -> LocalTimer:
            if timer.state != RUNNING:
                raise TimerStateError("Timer is not running")
            now = self.now()
            return replace(
                timer,
                state=PAUSED,
                pause_time=now,
                total_elapsed_ms=timer.total_elapsed_ms + _ms_between(timer.start_time, now),
            )

        timer = self._replace(job_id, timer_id, _pause)
        logger.info("Timer paused", extra={"timer_id": timer_id, "job_id": job_id, "user_id": self.user_id})
        return timer

    def resume(self, job_id: int, timer_id: str) -> LocalTimer:
        def _resume(timer: LocalTimer) -> LocalTimer:
            if timer.state != PAUSED:
                raise TimerStateError("Timer is not paused")
            # next running interval starts now; accumulated time carries over
            return replace(timer, state=RUNNING, pause_time=None, start_time=self.now())

        timer = self._replace(job_id, timer_id, _resume)
        logger.info("Timer resumed", extra={"timer_id": timer_id, "job_id": job_id, "user_id": self.user_id})
        return timer

    def stop(self, job_id: int, timer_id: str) -> TimerReview:
        """Freeze the elapsed time for review. The stored timer is not touched."""
        timer = self.get(job_id, timer_id)
        stopped_at = self.now()

        if timer.worker_names:
            mode = CrewMode.WORKERS
        else:
            mode = CrewMode.COUNT

        return TimerReview(
            timer=timer,
            stopped_at=stopped_at,
            elapsed_ms=elapsed_ms(timer, stopped_at),
            mode=mode,
            additional_crew=max(0, int(timer.crew_count) - 1),
            worker_names=list(timer.worker_names),
        )

    def _remove(self, job_id: int, timer_id: str) -> LocalTimer:
        timers = self.timers(job_id)
        remaining = [t for t in timers if t.id != timer_id]
        if len(remaining) == len(timers):
            raise NotFoundError("Timer not found")
        self.store.save_for_job(job_id, remaining)
        return next(t for t in timers if t.id == timer_id)

    def cancel(self, job_id: int, timer_id: str) -> LocalTimer:
        timer = self._remove(job_id, timer_id)
        logger.info("Timer cancelled", extra={"timer_id": timer_id, "job_id": job_id, "user_id": self.user_id})
        return timer

    def complete(self, job_id: int, timer_id: str) -> LocalTimer:
        """Drop a timer whose time entry has been written."""
        return self._remove(job_id, timer_id)
