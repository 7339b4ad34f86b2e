import asyncio
import json
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional

from fieldtrack.services.timer_engine import (
    TimerEngine,
    elapsed_ms,
    format_elapsed,
    format_hours_decimal,
)
from fieldtrack.services.timer_store import LocalTimer, format_timestamp


def timer_view(timer: LocalTimer, now: datetime) -> Dict[str, Any]:
    ms = elapsed_ms(timer, now)
    return {
        "id": timer.id,
        "job_id": timer.job_id,
        "component_id": timer.component_id,
        "component_name": timer.component_name,
        "state": timer.state,
        "start_time": format_timestamp(timer.start_time),
        "pause_time": None if timer.pause_time is None else format_timestamp(timer.pause_time),
        "total_elapsed_ms": int(timer.total_elapsed_ms),
        "crew_count": int(timer.crew_count),
        "worker_names": list(timer.worker_names),
        "elapsed_ms": ms,
        "display": format_elapsed(ms),
        "hours_decimal": format_hours_decimal(ms),
    }


def snapshot(engine: TimerEngine, job_id: int) -> List[Dict[str, Any]]:
    now = engine.now()
    return [timer_view(t, now) for t in engine.timers(job_id)]


async def tick_snapshots(
    engine: TimerEngine,
    job_id: int,
    *,
    interval: float = 1.0,
    ticks: Optional[int] = None,
) -> AsyncIterator[List[Dict[str, Any]]]:
    """One read-only snapshot per tick; never writes to the store."""
    count = 0
    while ticks is None or count < ticks:
        yield snapshot(engine, job_id)
        count += 1
        if ticks is None or count < ticks:
            await asyncio.sleep(interval)


async def sse_events(snapshots: AsyncIterator[List[Dict[str, Any]]]) -> AsyncIterator[str]:
    async for timers in snapshots:
        yield f"event: tick\ndata: {json.dumps(timers)}\n\n"
