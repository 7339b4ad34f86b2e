import asyncio
import json
from datetime import datetime, timedelta, timezone

from fieldtrack.services.crew import CrewResolution
from fieldtrack.services.timer_engine import TimerEngine
from fieldtrack.services.timer_store import MemoryStorage, TimerStore
from fieldtrack.services.timer_ticker import snapshot, sse_events, tick_snapshots, timer_view

T0 = datetime(2026, 3, 2, 14, 0, 0, tzinfo=timezone.utc)


def _engine(now):
    return TimerEngine(TimerStore(MemoryStorage(), "crew-1"), clock=lambda: now[0])


def test_timer_view_reports_live_elapsed():
    now = [T0]
    engine = _engine(now)
    timer = engine.start(1, 7, "Framing", CrewResolution(count=2, names=[]))

    view = timer_view(timer, T0 + timedelta(minutes=90, seconds=5))
    assert view["elapsed_ms"] == 5_405_000
    assert view["display"] == "01:30:05"
    assert view["hours_decimal"] == "1.50"
    assert view["crew_count"] == 2


def test_ticks_do_not_write_to_store():
    now = [T0]
    engine = _engine(now)
    engine.start(1, 7, "Framing", CrewResolution(count=1, names=[]))
    before = engine.store.storage.get_item(engine.store.key)

    async def _collect():
        return [chunk async for chunk in sse_events(tick_snapshots(engine, 1, interval=0, ticks=3))]

    chunks = asyncio.run(_collect())

    assert len(chunks) == 3
    assert all(chunk.startswith("event: tick\ndata: ") for chunk in chunks)
    assert json.loads(chunks[0].split("data: ", 1)[1])[0]["component_name"] == "Framing"
    assert engine.store.storage.get_item(engine.store.key) == before


def test_snapshot_is_per_job():
    now = [T0]
    engine = _engine(now)
    engine.start(1, 7, "Framing", CrewResolution(count=1, names=[]))
    engine.start(2, 8, "Roofing", CrewResolution(count=1, names=[]))
    assert [v["component_name"] for v in snapshot(engine, 2)] == ["Roofing"]
