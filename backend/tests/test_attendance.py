"""Tests for invitations, RSVP attendance and attendee listing.

Covers:
- Invite: role validation, owner-or-delegate authorization, idempotent re-invite
- SetAttendance: status normalization, self-registration, in-place update
- ListAttendees: strict owner only
"""
import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import ValidationError
from app.models.attendee import EventAttendee
from app.services.attendance_service import normalize_status
from tests.conftest import auth_headers, create_test_event, create_test_user, invite


def _setup(client):
    """Create an organizer, a guest, a third user and one event owned by the organizer."""
    organizer = create_test_user(client, name="organizer")
    guest = create_test_user(client, name="guest")
    third = create_test_user(client, name="third")
    event = create_test_event(client, organizer["id"], title="Board games")
    return organizer, guest, third, event


def _rows(db, event_id, user_id):
    return (
        db.query(EventAttendee)
        .filter(EventAttendee.event_id == event_id, EventAttendee.user_id == user_id)
        .all()
    )


class TestInvite:
    """POST /api/events/{id}/invite."""

    def test_invite_creates_one_row(self, client, db):
        organizer, guest, _, event = _setup(client)
        resp = invite(client, organizer["id"], event["id"], guest["id"], role="attendee")
        assert resp.status_code == 200
        assert resp.json() == {"message": "User invited successfully", "user_id": guest["id"], "role": "attendee"}

        rows = _rows(db, event["id"], guest["id"])
        assert len(rows) == 1
        assert rows[0].role == "attendee"
        assert rows[0].status == ""

    def test_role_is_case_insensitive(self, client, db):
        organizer, guest, _, event = _setup(client)
        resp = invite(client, organizer["id"], event["id"], guest["id"], role="ORGANIZER")
        assert resp.status_code == 200
        assert resp.json()["role"] == "organizer"
        assert _rows(db, event["id"], guest["id"])[0].role == "organizer"

    def test_second_invite_is_noop(self, client, db):
        organizer, guest, _, event = _setup(client)
        invite(client, organizer["id"], event["id"], guest["id"])
        before = db.query(EventAttendee).count()

        resp = invite(client, organizer["id"], event["id"], guest["id"])
        assert resp.status_code == 200
        assert resp.json() == {"message": "user already a participant"}
        assert db.query(EventAttendee).count() == before

    def test_reinvite_with_other_role_keeps_original(self, client, db):
        organizer, guest, _, event = _setup(client)
        invite(client, organizer["id"], event["id"], guest["id"], role="attendee")
        resp = invite(client, organizer["id"], event["id"], guest["id"], role="organizer")
        assert resp.json() == {"message": "user already a participant"}
        assert _rows(db, event["id"], guest["id"])[0].role == "attendee"

    def test_inviting_the_owner_is_noop(self, client):
        organizer, _, _, event = _setup(client)
        resp = invite(client, organizer["id"], event["id"], organizer["id"])
        assert resp.json() == {"message": "user already a participant"}

    @pytest.mark.parametrize("role", ["guest", "", "owner", " attendee"])
    def test_bad_role(self, client, role):
        organizer, guest, _, event = _setup(client)
        resp = invite(client, organizer["id"], event["id"], guest["id"], role=role)
        assert resp.status_code == 400
        assert resp.json() == {"error": "role must be attendee or organizer"}

    def test_missing_body_fields(self, client):
        organizer, _, _, event = _setup(client)
        resp = client.post(f"/api/events/{event['id']}/invite", headers=auth_headers(organizer["id"]),
                           json={"role": "attendee"})
        assert resp.status_code == 400

    def test_event_not_found(self, client):
        organizer, guest, _, _ = _setup(client)
        resp = invite(client, organizer["id"], 999, guest["id"])
        assert resp.status_code == 404
        assert resp.json() == {"error": "event not found"}

    def test_invitee_not_found(self, client):
        organizer, _, _, event = _setup(client)
        resp = invite(client, organizer["id"], event["id"], 999)
        assert resp.status_code == 404
        assert resp.json() == {"error": "invited user not found"}

    def test_non_organizer_forbidden(self, client, db):
        organizer, guest, third, event = _setup(client)
        resp = invite(client, guest["id"], event["id"], third["id"])
        assert resp.status_code == 403
        assert _rows(db, event["id"], third["id"]) == []

    def test_attendee_cannot_invite(self, client):
        organizer, guest, third, event = _setup(client)
        invite(client, organizer["id"], event["id"], guest["id"], role="attendee")
        resp = invite(client, guest["id"], event["id"], third["id"])
        assert resp.status_code == 403

    def test_delegated_organizer_can_invite(self, client, db):
        organizer, guest, third, event = _setup(client)
        invite(client, organizer["id"], event["id"], guest["id"], role="organizer")
        resp = invite(client, guest["id"], event["id"], third["id"])
        assert resp.status_code == 200
        assert len(_rows(db, event["id"], third["id"])) == 1

    def test_store_failure_returns_db_error(self, client, db, monkeypatch):
        organizer, guest, _, event = _setup(client)

        def failing_commit(self):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(Session, "commit", failing_commit)
        resp = invite(client, organizer["id"], event["id"], guest["id"])
        assert resp.status_code == 500
        assert resp.json()["error"].startswith("db error: ")
        assert "connection lost" in resp.json()["error"]

        monkeypatch.undo()
        assert _rows(db, event["id"], guest["id"]) == []


class TestNormalizeStatus:
    @pytest.mark.parametrize("raw, expected", [
        ("going", "Going"),
        ("GOING", "Going"),
        ("  Going  ", "Going"),
        ("not going", "Not Going"),
        ("NOT GOING", "Not Going"),
        ("maybe", "Maybe"),
        ("mAyBe", "Maybe"),
    ])
    def test_valid(self, raw, expected):
        assert normalize_status(raw) == expected

    @pytest.mark.parametrize("raw", ["", "yes", "not  going", "notgoing", "going!", "declined"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError):
            normalize_status(raw)


class TestSetAttendance:
    """POST /api/events/{id}/attendance."""

    def _set(self, client, user_id, event_id, status):
        return client.post(f"/api/events/{event_id}/attendance", headers=auth_headers(user_id),
                           json={"status": status})

    def test_invited_user_updates_status(self, client, db):
        organizer, guest, _, event = _setup(client)
        invite(client, organizer["id"], event["id"], guest["id"], role="attendee")

        resp = self._set(client, guest["id"], event["id"], "going")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "Going"
        assert data["role"] == "attendee"
        assert data["user_id"] == guest["id"]

    def test_uninvited_user_self_registers(self, client, db):
        _, guest, _, event = _setup(client)
        resp = self._set(client, guest["id"], event["id"], "maybe")
        assert resp.status_code == 200
        rows = _rows(db, event["id"], guest["id"])
        assert len(rows) == 1
        assert rows[0].role == "attendee"
        assert rows[0].status == "Maybe"

    def test_repeated_calls_keep_one_row(self, client, db):
        _, guest, _, event = _setup(client)
        self._set(client, guest["id"], event["id"], "going")
        self._set(client, guest["id"], event["id"], "going")
        resp = self._set(client, guest["id"], event["id"], "not going")
        assert resp.json()["status"] == "Not Going"

        rows = _rows(db, event["id"], guest["id"])
        assert len(rows) == 1
        assert rows[0].status == "Not Going"

    def test_organizer_role_unchanged(self, client, db):
        organizer, _, _, event = _setup(client)
        resp = self._set(client, organizer["id"], event["id"], "Going")
        assert resp.json()["role"] == "organizer"
        assert resp.json()["status"] == "Going"

    def test_invalid_status(self, client, db):
        _, guest, _, event = _setup(client)
        resp = self._set(client, guest["id"], event["id"], "absolutely")
        assert resp.status_code == 400
        assert resp.json() == {"error": "status must be one of: Going, Maybe, Not Going"}
        assert _rows(db, event["id"], guest["id"]) == []

    def test_event_not_found(self, client):
        _, guest, _, _ = _setup(client)
        resp = self._set(client, guest["id"], 999, "going")
        assert resp.status_code == 404


class TestListAttendees:
    """GET /api/events/{id}/attendees."""

    def test_owner_lists_all_rows(self, client):
        organizer, guest, third, event = _setup(client)
        invite(client, organizer["id"], event["id"], guest["id"])
        invite(client, organizer["id"], event["id"], third["id"], role="organizer")

        resp = client.get(f"/api/events/{event['id']}/attendees", headers=auth_headers(organizer["id"]))
        assert resp.status_code == 200
        by_user = {a["user_id"]: a["role"] for a in resp.json()}
        assert by_user == {organizer["id"]: "organizer", guest["id"]: "attendee", third["id"]: "organizer"}

    def test_delegated_organizer_forbidden(self, client):
        organizer, guest, _, event = _setup(client)
        invite(client, organizer["id"], event["id"], guest["id"], role="organizer")
        resp = client.get(f"/api/events/{event['id']}/attendees", headers=auth_headers(guest["id"]))
        assert resp.status_code == 403
        assert resp.json() == {"error": "only organizer can view attendees"}

    def test_event_not_found(self, client):
        organizer, _, _, _ = _setup(client)
        resp = client.get("/api/events/999/attendees", headers=auth_headers(organizer["id"]))
        assert resp.status_code == 404
