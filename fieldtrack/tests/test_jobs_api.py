def test_jobs_components_and_workers(client, auth_headers):
    office = auth_headers(user_id="office-1", role="office")
    crew = auth_headers()

    create = client.post("/jobs", json={"name": "Job A"}, headers=office)
    assert create.status_code == 200
    job_id = create.json()["id"]
    assert create.json()["is_active"] is True

    listing = client.get("/jobs", headers=crew)
    assert listing.status_code == 200
    assert any(row["id"] == job_id for row in listing.json())

    assert client.get(f"/jobs/{job_id}", headers=crew).json()["name"] == "Job A"
    assert client.get("/jobs/999999", headers=crew).status_code == 404

    comp = client.post(f"/jobs/{job_id}/components", json={"name": "Decking"}, headers=office)
    assert comp.status_code == 200
    assert comp.json()["job_id"] == job_id

    components = client.get(f"/jobs/{job_id}/components", headers=crew).json()
    assert [c["name"] for c in components] == ["Decking"]

    worker = client.post("/workers", json={"name": "Ana"}, headers=office)
    assert worker.status_code == 200
    worker_id = worker.json()["id"]
    assert [w["name"] for w in client.get("/workers", headers=crew).json()] == ["Ana"]

    deactivated = client.post(f"/workers/{worker_id}/deactivate", headers=office)
    assert deactivated.json()["active"] is False
    assert client.get("/workers", headers=crew).json() == []


def test_job_hours_split(client, auth_headers, db, job_factory, component_factory):
    from datetime import datetime

    from fieldtrack.models.time_entry import TimeEntry

    job = job_factory()
    component = component_factory(job.id)
    db.add_all(
        [
            TimeEntry(
                id="c-1",
                job_id=job.id,
                component_id=component.id,
                user_id="crew-1",
                start_time=datetime(2026, 3, 2, 8, 0),
                total_hours=2.0,
                crew_count=3,
                worker_names=[],
            ),
            TimeEntry(
                id="k-1",
                job_id=job.id,
                user_id="crew-1",
                start_time=datetime(2026, 3, 2, 8, 0),
                total_hours=1.5,
                crew_count=0,
                worker_names=[],
            ),
        ]
    )
    db.commit()

    r = client.get(f"/jobs/{job.id}/hours", headers=auth_headers())
    assert r.status_code == 200
    assert r.json() == {"component_man_hours": 6.0, "clock_in_man_hours": 1.5}
