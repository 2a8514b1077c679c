"""Test fixtures for the backend."""
import os
import tempfile

import pytest
from fastapi.testclient import TestClient

_tmp_dir = tempfile.mkdtemp(prefix="issuetracker-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_tmp_dir, "test_backend.db")
os.environ["UPLOAD_DIR"] = os.path.join(_tmp_dir, "uploads")
os.environ["SALT_ROUNDS"] = "4"
os.environ.setdefault("SECRET_KEY", "test-secret")

from issuetracker.database import Base, SessionLocal, engine  # noqa: E402
from main import app  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture(autouse=True)
def prepare_database():
    """Recreate the schema so every test starts from an empty store."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(client):
    def _make_user(username, password="secret123", role="User", tenant_id=0):
        response = client.post("/api/register", json={
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
            "role": role,
            "tenant_id": tenant_id,
        })
        assert response.status_code == 201, response.text
        return response.json()["userId"]
    return _make_user


@pytest.fixture
def make_issue(client):
    def _make_issue(user_id, title="VPN down", description="Cannot connect", issue_type="it", status="open"):
        response = client.post("/issues", json={
            "user_id": user_id,
            "title": title,
            "description": description,
            "issue_type": issue_type,
            "status": status,
        })
        assert response.status_code == 201, response.text
        return response.json()["data"]["id"]
    return _make_issue
