from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from fieldtrack.core.config import timer_tick_seconds
from fieldtrack.database import SessionLocal
from fieldtrack.deps.auth import require_auth
from fieldtrack.deps.errors import user_action
from fieldtrack.schemas.timer import (
    TimerResponse,
    TimerReviewResponse,
    TimerSaveRequest,
    TimerSaveResponse,
    TimerStartRequest,
)
from fieldtrack.services.crew import TimerSource, active_worker_names, resolve_crew
from fieldtrack.services.job_lookup import get_active_component, get_job
from fieldtrack.services.time_entry_service import TimerSaveForm, save_timer_entry
from fieldtrack.services.timer_engine import TimerEngine, format_elapsed
from fieldtrack.services.timer_store import SqlStorage, TimerStore
from fieldtrack.services.timer_ticker import snapshot, sse_events, tick_snapshots, timer_view

router = APIRouter(prefix="/jobs/{job_id}/timers", tags=["Timers"])


def _engine(db, user_id: str) -> TimerEngine:
    return TimerEngine(TimerStore(SqlStorage(db), user_id))


def _to_response(engine: TimerEngine, timer) -> TimerResponse:
    return TimerResponse(**timer_view(timer, engine.now()))


@router.get("", response_model=List[TimerResponse])
def list_timers(job_id: int, user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        engine = _engine(db, user_id)
        return [TimerResponse(**view) for view in snapshot(engine, job_id)]
    finally:
        db.close()


@router.get("/stream")
def stream_timers(
    job_id: int,
    ticks: Optional[int] = Query(default=None, ge=1, le=86_400),
    user_id: str = Depends(require_auth),
):
    async def events():
        db = SessionLocal()
        try:
            engine = _engine(db, user_id)
            snapshots = tick_snapshots(engine, job_id, interval=timer_tick_seconds(), ticks=ticks)
            async for chunk in sse_events(snapshots):
                yield chunk
        finally:
            db.close()

    return StreamingResponse(events(), media_type="text/event-stream")


@router.post("", response_model=TimerResponse)
def start_timer(job_id: int, payload: TimerStartRequest, user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to start timer", job_id=job_id, user_id=user_id):
            engine = _engine(db, user_id)
            get_job(db, job_id)

            component_id, component_name = None, ""
            if payload.component_id:
                component = get_active_component(db, job_id, payload.component_id)
                component_id, component_name = component.id, component.name

            crew = resolve_crew(
                TimerSource(
                    mode=payload.mode,
                    additional_crew=payload.additional_crew,
                    worker_ids=tuple(payload.worker_ids),
                ),
                active_worker_names(db),
            )
            timer = engine.start(job_id, component_id, component_name, crew)
            db.commit()
            return _to_response(engine, timer)
    finally:
        db.close()


@router.post("/{timer_id}/pause", response_model=TimerResponse)
def pause_timer(job_id: int, timer_id: str, user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to pause timer", job_id=job_id, timer_id=timer_id, user_id=user_id):
            engine = _engine(db, user_id)
            timer = engine.pause(job_id, timer_id)
            db.commit()
            return _to_response(engine, timer)
    finally:
        db.close()


@router.post("/{timer_id}/resume", response_model=TimerResponse)
def resume_timer(job_id: int, timer_id: str, user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to resume timer", job_id=job_id, timer_id=timer_id, user_id=user_id):
            engine = _engine(db, user_id)
            timer = engine.resume(job_id, timer_id)
            db.commit()
            return _to_response(engine, timer)
    finally:
        db.close()


@router.post("/{timer_id}/stop", response_model=TimerReviewResponse)
def stop_timer(job_id: int, timer_id: str, user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to stop timer", job_id=job_id, timer_id=timer_id, user_id=user_id):
            review = _engine(db, user_id).stop(job_id, timer_id)
            return TimerReviewResponse(
                timer=TimerResponse(**timer_view(review.timer, review.stopped_at)),
                stopped_at=review.stopped_at,
                elapsed_ms=review.elapsed_ms,
                display=format_elapsed(review.elapsed_ms),
                rounded_hours=review.rounded_hours,
                mode=review.mode,
                additional_crew=review.additional_crew,
                worker_names=review.worker_names,
            )
    finally:
        db.close()


@router.post("/{timer_id}/save", response_model=TimerSaveResponse)
def save_timer(
    job_id: int,
    timer_id: str,
    payload: TimerSaveRequest,
    user_id: str = Depends(require_auth),
):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to save time entry", job_id=job_id, timer_id=timer_id, user_id=user_id):
            result = save_timer_entry(
                db,
                _engine(db, user_id),
                job_id,
                timer_id,
                TimerSaveForm(
                    mode=payload.mode,
                    additional_crew=payload.additional_crew,
                    worker_ids=tuple(payload.worker_ids),
                    notes=payload.notes,
                    stopped_at=payload.stopped_at,
                ),
            )
            return TimerSaveResponse.from_result(result)
    finally:
        db.close()


@router.post("/{timer_id}/cancel", response_model=TimerResponse)
def cancel_timer(job_id: int, timer_id: str, user_id: str = Depends(require_auth)):
    db = SessionLocal()
    try:
        with user_action(db, "Failed to cancel timer", job_id=job_id, timer_id=timer_id, user_id=user_id):
            engine = _engine(db, user_id)
            timer = engine.cancel(job_id, timer_id)
            db.commit()
            return _to_response(engine, timer)
    finally:
        db.close()
