import json

import pytest


@pytest.fixture
def site(job_factory, component_factory):
    job = job_factory()
    component = component_factory(job.id, "Framing")
    return job, component


def test_timer_lifecycle(client, auth_headers, site, worker_factory):
    job, component = site
    ana = worker_factory("Ana")
    headers = auth_headers()
    base = f"/jobs/{job.id}/timers"

    started = client.post(base, json={"component_id": component.id, "additional_crew": 2}, headers=headers)
    assert started.status_code == 200, started.text
    timer = started.json()
    assert timer["state"] == "running"
    assert timer["crew_count"] == 3
    assert timer["component_name"] == "Framing"

    listing = client.get(base, headers=headers).json()
    assert [t["id"] for t in listing] == [timer["id"]]

    paused = client.post(f"{base}/{timer['id']}/pause", headers=headers)
    assert paused.json()["state"] == "paused"
    assert client.post(f"{base}/{timer['id']}/pause", headers=headers).status_code == 409

    resumed = client.post(f"{base}/{timer['id']}/resume", headers=headers)
    assert resumed.json()["state"] == "running"

    review = client.post(f"{base}/{timer['id']}/stop", headers=headers)
    assert review.status_code == 200
    body = review.json()
    assert body["mode"] == "count"
    assert body["additional_crew"] == 2
    assert body["rounded_hours"] == 0.0

    saved = client.post(
        f"{base}/{timer['id']}/save",
        json={"mode": "workers", "worker_ids": [ana.id], "stopped_at": body["stopped_at"]},
        headers=headers,
    )
    assert saved.status_code == 200, saved.text
    entry = saved.json()["entry"]
    assert entry["crew_count"] == 2
    assert entry["worker_names"] == ["Ana"]
    assert entry["is_manual"] is False

    assert client.get(base, headers=headers).json() == []


def test_timers_are_per_user(client, auth_headers, site):
    job, component = site
    base = f"/jobs/{job.id}/timers"
    client.post(base, json={"component_id": component.id}, headers=auth_headers(user_id="crew-1"))

    assert client.get(base, headers=auth_headers(user_id="crew-2")).json() == []


def test_start_without_component_400(client, auth_headers, site):
    job, _component = site
    r = client.post(f"/jobs/{job.id}/timers", json={}, headers=auth_headers())
    assert r.status_code == 400
    assert r.json()["detail"] == "Please select a component"


def test_start_with_foreign_component_404(client, auth_headers, site, job_factory, component_factory):
    job, _component = site
    other = component_factory(job_factory("Other").id, "Roofing")
    r = client.post(f"/jobs/{job.id}/timers", json={"component_id": other.id}, headers=auth_headers())
    assert r.status_code == 404


def test_cancel_discards_timer(client, auth_headers, site):
    job, component = site
    headers = auth_headers()
    base = f"/jobs/{job.id}/timers"
    timer = client.post(base, json={"component_id": component.id}, headers=headers).json()

    assert client.post(f"{base}/{timer['id']}/cancel", headers=headers).status_code == 200
    assert client.get(base, headers=headers).json() == []
    assert client.post(f"{base}/{timer['id']}/cancel", headers=headers).status_code == 404


def test_stream_emits_ticks(client, auth_headers, site, monkeypatch):
    monkeypatch.setenv("TIMER_TICK_SECONDS", "0.01")
    job, component = site
    headers = auth_headers()
    base = f"/jobs/{job.id}/timers"
    timer = client.post(base, json={"component_id": component.id}, headers=headers).json()

    r = client.get(f"{base}/stream?ticks=2", headers=headers)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/event-stream")

    events = [chunk for chunk in r.text.split("\n\n") if chunk]
    assert len(events) == 2
    first = events[0].split("\n")
    assert first[0] == "event: tick"
    payload = json.loads(first[1][len("data: "):])
    assert payload[0]["id"] == timer["id"]


def test_save_database_failure_keeps_timer(client, auth_headers, site, monkeypatch):
    from sqlalchemy.exc import OperationalError

    from fieldtrack.services.timer_engine import TimerEngine

    job, component = site
    headers = auth_headers()
    base = f"/jobs/{job.id}/timers"
    timer = client.post(base, json={"component_id": component.id}, headers=headers).json()

    def _locked(self, job_id, timer_id):
        raise OperationalError("UPDATE local_storage", {}, Exception("database is locked"))

    monkeypatch.setattr(TimerEngine, "complete", _locked)
    r = client.post(f"{base}/{timer['id']}/save", json={}, headers=headers)

    assert r.status_code == 500
    assert r.json()["detail"] == "Failed to save time entry"
    assert client.get(f"/jobs/{job.id}/time_entries", headers=headers).json() == []
    assert [t["id"] for t in client.get(base, headers=headers).json()] == [timer["id"]]
