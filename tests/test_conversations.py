"""Integration tests for issue conversations and their attachments."""
import pytest

from conftest import PNG_BYTES
from issuetracker.models import Conversation


@pytest.fixture
def thread(client, make_user, make_issue):
    """An issue reported by alice and assigned to bob, plus an outsider carol"""
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    issue_id = make_issue(alice)
    client.put(f"/issues/{issue_id}/assign", json={"username": "bob"})
    return {"issue": issue_id, "alice": alice, "bob": bob, "carol": carol}


def post_message(client, issue_id, sender_id, text="hello", **kwargs):
    return client.post(
        f"/issues/{issue_id}/conversations",
        json={"message_type": "text", "message_text": text},
        headers={"x-user-id": str(sender_id)},
        **kwargs,
    )


def test_reporter_and_assignee_can_post(client, thread):
    response = post_message(client, thread["issue"], thread["alice"], text="  any update?  ")
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["sender_id"] == thread["alice"]
    assert data["sender_name"] == "alice"
    assert data["message_text"] == "any update?"
    assert data["attachment_url"] is None

    assert post_message(client, thread["issue"], thread["bob"]).status_code == 201


def test_third_party_is_forbidden_and_nothing_is_inserted(client, db_session, thread):
    response = post_message(client, thread["issue"], thread["carol"])
    assert response.status_code == 403
    assert response.json() == {"status": "error", "message": "Not authorized"}
    assert db_session.query(Conversation).count() == 0


def test_unassigned_issue_only_accepts_the_reporter(client, make_user, make_issue):
    alice = make_user("alice")
    bob = make_user("bob")
    issue_id = make_issue(alice)
    assert post_message(client, issue_id, bob).status_code == 403
    assert post_message(client, issue_id, alice).status_code == 201


def test_post_validation(client, thread):
    assert post_message(client, thread["issue"], thread["alice"], text="   ").status_code == 400
    assert post_message(client, thread["issue"], "abc").status_code == 400
    no_sender = client.post(f"/issues/{thread['issue']}/conversations", json={"message_text": "hi"})
    assert no_sender.status_code == 400
    assert post_message(client, 999, thread["alice"]).status_code == 404


def test_sender_from_body_or_token(client, thread):
    by_body = client.post(
        f"/issues/{thread['issue']}/conversations",
        json={"sender_id": thread["bob"], "message_text": "from body"},
    )
    assert by_body.status_code == 201
    assert by_body.json()["data"]["sender_id"] == thread["bob"]

    token = client.post("/login", json={"username": "alice", "password": "secret123"}).json()["access_token"]
    by_token = client.post(
        f"/issues/{thread['issue']}/conversations",
        json={"message_text": "from token"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert by_token.status_code == 201
    assert by_token.json()["data"]["sender_id"] == thread["alice"]


def test_header_takes_precedence_over_body(client, thread):
    response = client.post(
        f"/issues/{thread['issue']}/conversations",
        json={"sender_id": thread["alice"], "message_text": "spoof"},
        headers={"x-user-id": str(thread["carol"])},
    )
    assert response.status_code == 403


def test_list_messages_in_order_with_participants(client, thread):
    post_message(client, thread["issue"], thread["alice"], text="first")
    post_message(client, thread["issue"], thread["bob"], text="second")

    response = client.get(f"/issues/{thread['issue']}/conversations")
    assert response.status_code == 200
    messages = response.json()["data"]
    assert [m["message_text"] for m in messages] == ["first", "second"]
    assert [m["sender_name"] for m in messages] == ["alice", "bob"]
    for message in messages:
        assert message["reporter_id"] == thread["alice"]
        assert message["assignee_id"] == thread["bob"]
        assert message["assignee_name"] == "bob"


def test_list_messages_validation(client):
    assert client.get("/issues/abc/conversations").status_code == 400
    empty = client.get("/issues/999/conversations")
    assert empty.status_code == 200
    assert empty.json()["data"] == []


def test_attachment_only_message_and_gated_download(client, thread):
    response = client.post(
        f"/issues/{thread['issue']}/conversations",
        data={"message_type": "file"},
        files={"attachment": ("log.txt", b"stack trace", "text/plain")},
        headers={"x-user-id": str(thread["bob"])},
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["message_text"] == ""
    assert data["attachment"].endswith(".txt")
    assert data["attachment_url"] == f"http://testserver/conversations/{data['id']}/attachment"

    listed = client.get(f"/issues/{thread['issue']}/conversations").json()["data"]
    assert listed[0]["attachment_url"] == data["attachment_url"]

    for viewer in (thread["alice"], thread["bob"]):
        download = client.get(data["attachment_url"], headers={"x-user-id": str(viewer)})
        assert download.status_code == 200
        assert download.content == b"stack trace"

    outsider = client.get(data["attachment_url"], headers={"x-user-id": str(thread["carol"])})
    assert outsider.status_code == 403


def test_attachment_download_errors(client, thread):
    plain = post_message(client, thread["issue"], thread["alice"]).json()["data"]
    url = f"/conversations/{plain['id']}/attachment"
    assert client.get(url, headers={"x-user-id": str(thread["alice"])}).status_code == 404
    assert client.get(url).status_code == 400
    assert client.get(url, headers={"x-user-id": "abc"}).status_code == 400
    assert client.get("/conversations/999/attachment", headers={"x-user-id": "1"}).status_code == 404


def test_image_attachment_on_message(client, thread):
    response = client.post(
        f"/issues/{thread['issue']}/conversations",
        data={"message_text": "see screenshot"},
        files={"attachment": ("shot.png", PNG_BYTES, "image/png")},
        headers={"x-user-id": str(thread["alice"])},
    )
    assert response.status_code == 201
    assert response.json()["data"]["message_text"] == "see screenshot"
