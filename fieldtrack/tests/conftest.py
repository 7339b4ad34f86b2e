import os
import tempfile

_default_test_secret = "test-jwt-secret-for-pytest-only-0000000000000000"
if len(os.environ.get("JWT_SECRET", "")) < 32:
    os.environ["JWT_SECRET"] = _default_test_secret

_TEST_DIR = tempfile.mkdtemp(prefix="fieldtrack-tests-")
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", f"sqlite:///{os.path.join(_TEST_DIR, 'fieldtrack.db')}")
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["ENV"] = "test"
os.environ["STORAGE_ROOT"] = os.path.join(_TEST_DIR, "storage")

import pytest

from fieldtrack import database
from fieldtrack import models  # noqa: F401
from fieldtrack.models.component import Component
from fieldtrack.models.job import Job
from fieldtrack.models.worker import Worker


@pytest.fixture(scope="session", autouse=True)
def _prepare_test_database() -> None:
    database.configure_database()
    database.Base.metadata.create_all(bind=database.engine)


def _empty_tables() -> None:
    with database.engine.begin() as conn:
        for table in reversed(database.Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture(scope="function", autouse=True)
def _empty_tables_between_tests():
    _empty_tables()
    yield
    _empty_tables()


@pytest.fixture
def db():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def job_factory(db):
    def _create(name: str = "Main Street Build") -> Job:
        row = Job(name=name, is_active=True)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _create


@pytest.fixture
def component_factory(db):
    def _create(job_id: int, name: str = "Framing", is_active: bool = True) -> Component:
        row = Component(job_id=job_id, name=name, is_active=is_active)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _create


@pytest.fixture
def worker_factory(db):
    def _create(name: str, active: bool = True) -> Worker:
        row = Worker(name=name, active=active)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _create


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from fieldtrack.main import app

    return TestClient(app)


@pytest.fixture
def auth_headers(client):
    def _headers(user_id: str = "crew-1", role: str = "crew") -> dict:
        resp = client.post("/auth/token", json={"user_id": user_id, "role": role})
        assert resp.status_code == 200, f"token request failed: {resp.status_code} {resp.text}"
        data = resp.json()
        assert "access_token" in data, f"token response missing access_token: {data}"
        return {"Authorization": f"Bearer {data['access_token']}"}

    return _headers
