import jwt


def test_missing_authorization_header_401(client):
    r = client.get("/jobs")
    assert r.status_code == 401


def test_wrong_scheme_401(client, auth_headers):
    token = auth_headers()["Authorization"].split(" ", 1)[1]
    r = client.get("/jobs", headers={"Authorization": f"Basic {token}"})
    assert r.status_code == 401


def test_garbled_bearer_token_401(client):
    r = client.get("/jobs", headers={"Authorization": "Bearer not-a-real-token"})
    assert r.status_code == 401


def test_token_signed_with_other_secret_401(client):
    forged = jwt.encode({"sub": "intruder", "role": "office"}, "x" * 48, algorithm="HS256")
    r = client.get("/jobs", headers={"Authorization": f"Bearer {forged}"})
    assert r.status_code == 401


def test_crew_cannot_create_jobs_403(client, auth_headers):
    r = client.post("/jobs", json={"name": "Nope"}, headers=auth_headers(role="crew"))
    assert r.status_code == 403


def test_unknown_role_claim_403(client, auth_headers):
    r = client.post("/jobs", json={"name": "Nope"}, headers=auth_headers(role="superuser"))
    assert r.status_code == 403


def test_token_endpoint_hidden_outside_dev(client, monkeypatch):
    monkeypatch.setenv("ENV", "production")
    r = client.post("/auth/token", json={"user_id": "u", "role": "office"})
    assert r.status_code == 404
