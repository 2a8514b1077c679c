"""Integration tests for registration and login."""
import pytest

from issuetracker.models import User

REGISTER_PAYLOAD = {
    "username": "alice",
    "email": "alice@example.com",
    "password": "secret123",
    "role": "IT User",
}


def test_register_returns_id_username_and_role(client, db_session):
    response = client.post("/api/register", json=REGISTER_PAYLOAD)
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "ok"
    assert body["username"] == "alice"
    assert body["user_role"] == "IT User"

    stored = db_session.query(User).filter(User.id == body["userId"]).one()
    assert stored.tenant_id == 0
    assert stored.password != "secret123"


@pytest.mark.parametrize("missing", ["username", "email", "password", "role"])
def test_register_missing_field_is_rejected_and_writes_nothing(client, db_session, missing):
    payload = {k: v for k, v in REGISTER_PAYLOAD.items() if k != missing}
    response = client.post("/api/register", json=payload)
    assert response.status_code == 400
    assert response.json()["status"] == "error"
    assert db_session.query(User).count() == 0


def test_register_rejects_unknown_role(client, db_session):
    response = client.post("/api/register", json={**REGISTER_PAYLOAD, "role": "Superhero"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid role: Superhero"
    assert db_session.query(User).count() == 0


def test_unknown_role_is_still_accepted_by_admin_user_create(client):
    response = client.post("/users", json={
        "tenant_id": 3,
        "username": "bob",
        "email": "bob@example.com",
        "password": "pw",
        "role": "Superhero",
    })
    assert response.status_code == 201
    user_id = response.json()["userId"]
    assert client.get(f"/users/{user_id}").json()["data"]["role"] == "Superhero"


def test_login_with_hashed_password(client, make_user):
    user_id = make_user("alice", password="secret123", role="Administrator User")
    response = client.post("/login", json={"username": "alice", "password": "secret123"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["userId"] == user_id
    assert body["role"] == "Administrator User"
    assert body["access_token"]


def test_login_wrong_password(client, make_user):
    make_user("alice", password="secret123")
    response = client.post("/login", json={"username": "alice", "password": "nope"})
    assert response.status_code == 401
    assert response.json() == {"status": "error", "message": "Invalid credentials"}


def test_login_unknown_user(client):
    response = client.post("/login", json={"username": "ghost", "password": "x"})
    assert response.status_code == 401


def test_login_requires_both_fields(client):
    response = client.post("/login", json={"username": "alice"})
    assert response.status_code == 400


def test_login_legacy_plaintext_password(client, db_session):
    db_session.add(User(tenant_id=0, username="legacy", email="l@example.com",
                        password="plainpass", user_role="User"))
    db_session.commit()

    ok = client.post("/login", json={"username": "legacy", "password": "plainpass"})
    assert ok.status_code == 200
    assert ok.json()["username"] == "legacy"

    bad = client.post("/login", json={"username": "legacy", "password": "plainpas"})
    assert bad.status_code == 401
