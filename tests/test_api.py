"""HTTP tests for the contact and admin message endpoints."""

from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from database import get_session
from main import app
from models.message import Message


class TestContactEndpoint:

    def test_submit_returns_created_with_id(self, client, session, valid_submission):
        response = client.post("/contact", json=valid_submission)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["messageId"]
        assert session.get(Message, body["messageId"]) is not None

    def test_missing_field_is_400(self, client, valid_submission):
        del valid_submission["subject"]

        response = client.post("/contact", json=valid_submission)

        assert response.status_code == 400
        assert response.json() == {"error": "All fields are required"}

    def test_bad_email_is_400(self, client, valid_submission):
        valid_submission["email"] = "jane-at-example.com"

        response = client.post("/contact", json=valid_submission)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid email format"}

    def test_email_with_trailing_newline_is_400(self, client, session, valid_submission):
        valid_submission["email"] = "jane@example.com\n"

        response = client.post("/contact", json=valid_submission)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid email format"}
        assert session.exec(select(Message)).all() == []

    def test_long_name_is_accepted(self, client, valid_submission):
        valid_submission["name"] = "J" * 250

        response = client.post("/contact", json=valid_submission)

        assert response.status_code == 201

    def test_non_text_field_is_400(self, client, valid_submission):
        valid_submission["name"] = ["not", "text"]

        response = client.post("/contact", json=valid_submission)

        assert response.status_code == 400
        assert "error" in response.json()

    def test_storage_failure_is_generic_500(self, engine, client, valid_submission):
        def broken_session():
            with Session(engine) as session:
                def broken_commit():
                    raise OperationalError("INSERT INTO messages", {}, Exception("connection refused by db-host-7"))
                session.commit = broken_commit
                yield session

        app.dependency_overrides[get_session] = broken_session

        response = client.post("/contact", json=valid_submission)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert "db-host-7" not in response.text

    def test_owner_notified_when_mail_enabled(self, client, valid_submission, monkeypatch):
        sent = []

        async def fake_notify(message):
            sent.append(message.subject)

        monkeypatch.setattr("api.contact.mail_enabled", lambda: True)
        monkeypatch.setattr("api.contact.notify_owner", fake_notify)

        response = client.post("/contact", json=valid_submission)

        assert response.status_code == 201
        assert sent == ["Hi"]


class TestAdminAuthorization:

    def test_list_without_credential_is_401(self, client):
        response = client.get("/admin/messages")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_wrong_token_is_401_on_every_operation(self, client):
        headers = {"Authorization": "Bearer nope"}

        assert client.get("/admin/messages", headers=headers).status_code == 401
        assert client.put("/admin/messages", json={"messageId": "x", "read": True}, headers=headers).status_code == 401
        assert client.delete("/admin/messages", params={"id": "x"}, headers=headers).status_code == 401

    def test_credential_checked_before_update_body(self, client):
        response = client.put(
            "/admin/messages",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 401


class TestAdminList:

    def test_pagination_descriptor(self, client, admin_headers, make_message):
        for i in range(3):
            make_message(i)

        response = client.get("/admin/messages", params={"page": 2, "limit": 2}, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"] == {"page": 2, "limit": 2, "totalCount": 3, "totalPages": 2}
        assert [m["subject"] for m in body["messages"]] == ["Subject 0"]

    def test_messages_use_camel_case_keys(self, client, admin_headers, make_message):
        make_message(0)

        body = client.get("/admin/messages", headers=admin_headers).json()

        assert set(body["messages"][0]) == {
            "id", "name", "email", "subject", "message", "createdAt", "read", "replied",
        }

    def test_defaults_to_page_one_limit_ten(self, client, admin_headers):
        body = client.get("/admin/messages", headers=admin_headers).json()

        assert body["pagination"]["page"] == 1
        assert body["pagination"]["limit"] == 10

    def test_invalid_page_is_400(self, client, admin_headers):
        assert client.get("/admin/messages", params={"page": 0}, headers=admin_headers).status_code == 400
        assert client.get("/admin/messages", params={"page": "abc"}, headers=admin_headers).status_code == 400
        assert client.get("/admin/messages", params={"limit": 1000}, headers=admin_headers).status_code == 400


class TestAdminMutations:

    def test_update_requires_message_id(self, client, admin_headers):
        response = client.put("/admin/messages", json={"read": True}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Message ID is required"}

    def test_update_with_malformed_body_is_400(self, client, admin_headers):
        headers = {**admin_headers, "Content-Type": "application/json"}

        malformed = client.put("/admin/messages", content=b"{not json", headers=headers)
        wrong_type = client.put("/admin/messages", json={"messageId": "x", "read": "maybe"}, headers=admin_headers)
        not_object = client.put("/admin/messages", json=["x"], headers=admin_headers)

        assert malformed.status_code == 400
        assert wrong_type.status_code == 400
        assert not_object.status_code == 400
        assert malformed.json() == {"error": "Invalid request"}

    def test_update_unknown_id_is_404(self, client, admin_headers):
        response = client.put("/admin/messages", json={"messageId": "missing", "read": True}, headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Message not found"}

    def test_delete_requires_id(self, client, admin_headers):
        response = client.delete("/admin/messages", headers=admin_headers)

        assert response.status_code == 400

    def test_delete_twice_is_404(self, client, admin_headers, make_message):
        message = make_message(0)

        first = client.delete("/admin/messages", params={"id": message.id}, headers=admin_headers)
        second = client.delete("/admin/messages", params={"id": message.id}, headers=admin_headers)

        assert first.status_code == 200
        assert second.status_code == 404


def test_contact_to_admin_round_trip(client, admin_headers):
    submitted = client.post("/contact", json={
        "name": "Jane Doe",
        "email": "jane@example.com",
        "subject": "Hi",
        "message": "Hello there",
    })
    assert submitted.status_code == 201
    message_id = submitted.json()["messageId"]

    listing = client.get("/admin/messages", params={"page": 1, "limit": 10}, headers=admin_headers).json()
    assert listing["messages"][0]["id"] == message_id
    assert listing["messages"][0]["read"] is False

    updated = client.put("/admin/messages", json={"messageId": message_id, "read": True}, headers=admin_headers)
    assert updated.json() == {"success": True, "message": "Message updated successfully"}

    listing = client.get("/admin/messages", headers=admin_headers).json()
    assert listing["messages"][0]["read"] is True
    assert listing["messages"][0]["replied"] is False

    deleted = client.delete("/admin/messages", params={"id": message_id}, headers=admin_headers)
    assert deleted.json() == {"success": True, "message": "Message deleted successfully"}

    listing = client.get("/admin/messages", headers=admin_headers).json()
    assert message_id not in [m["id"] for m in listing["messages"]]
