import base64


def test_manual_entry_end_to_end(client, auth_headers, job_factory, component_factory, worker_factory):
    job = job_factory()
    component = component_factory(job.id, "Framing")
    ids = [worker_factory(name).id for name in ("Ana", "Ben", "Cy")]
    headers = auth_headers()

    r = client.post(
        f"/jobs/{job.id}/time_entries/manual",
        json={
            "component_id": component.id,
            "hours": 2,
            "minutes": 30,
            "mode": "workers",
            "worker_ids": ids,
            "entry_date": "2026-03-01",
            "photos": [
                {"filename": "deck.jpg", "content_base64": base64.b64encode(b"jpeg-bytes").decode()},
            ],
        },
        headers=headers,
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["entry"]["total_hours"] == 2.5
    assert body["entry"]["crew_count"] == 3
    assert body["component_man_hours"] == 7.5
    assert len(body["photos"]) == 1
    assert body["warnings"] == []

    listing = client.get(f"/jobs/{job.id}/time_entries", headers=headers)
    assert listing.status_code == 200
    assert [e["id"] for e in listing.json()] == [body["entry"]["id"]]

    notes = client.get(f"/jobs/{job.id}/notifications", headers=headers).json()
    assert notes["unread_count"] == 1
    assert notes["rows"][0]["brief"] == "Manual entry: 2.50h on Framing (3 crew) + 1 photo"

    read = client.post(f"/notifications/{notes['rows'][0]['id']}/read", headers=headers)
    assert read.json()["is_read"] is True
    assert client.get(f"/jobs/{job.id}/notifications", headers=headers).json()["unread_count"] == 0


def test_manual_entry_rejects_zero_time(client, auth_headers, job_factory, component_factory):
    job = job_factory()
    component = component_factory(job.id)
    r = client.post(
        f"/jobs/{job.id}/time_entries/manual",
        json={"component_id": component.id, "hours": 0, "minutes": 0},
        headers=auth_headers(),
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Please enter valid time"


def test_manual_entry_rejects_bad_photo_data(client, auth_headers, job_factory, component_factory):
    job = job_factory()
    component = component_factory(job.id)
    r = client.post(
        f"/jobs/{job.id}/time_entries/manual",
        json={
            "component_id": component.id,
            "hours": 1,
            "photos": [{"filename": "x.jpg", "content_base64": "***"}],
        },
        headers=auth_headers(),
    )
    assert r.status_code == 400
    assert client.get(f"/jobs/{job.id}/time_entries", headers=auth_headers()).json() == []


def test_unknown_job_404(client, auth_headers):
    r = client.get("/jobs/424242/time_entries", headers=auth_headers())
    assert r.status_code == 404
