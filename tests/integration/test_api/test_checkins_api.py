"""Integration tests for check-in and scan session API."""
import uuid

import pytest

from app.services.checkin import CheckinOutcome, CheckinStatus


@pytest.mark.integration
class TestCheckinAPI:
    """Direct scans through POST /checkins."""

    def test_first_then_limit(self, admin_client, event, contact, make_invite):
        invite = make_invite(event, contact, max_checkins=1)

        first = admin_client.post("/api/v1/checkins", json={"code": invite.qr_token})
        assert first.status_code == 200
        assert first.json()["status"] == "first_check_in"
        assert first.json()["admitted"] is True
        assert first.json()["display_name"] == "Ada Lovelace"
        assert first.json()["checkin_count"] == 1

        second = admin_client.post("/api/v1/checkins", json={"code": invite.qr_token})
        assert second.json()["status"] == "limit_reached"
        assert second.json()["admitted"] is False
        assert second.json()["prior_count"] == 1
        assert second.json()["previous_checkin_at"] is not None

    def test_repeat(self, admin_client, event, make_invite):
        invite = make_invite(event, checkins=1)

        response = admin_client.post("/api/v1/checkins", json={"code": invite.qr_token})

        assert response.json()["status"] == "repeat"
        assert response.json()["prior_count"] == 1

    def test_unknown_and_malformed(self, admin_client):
        unknown = admin_client.post("/api/v1/checkins", json={"code": str(uuid.uuid4())})
        malformed = admin_client.post("/api/v1/checkins", json={"code": "WIFI:S:guest;;"})

        assert unknown.status_code == 200
        assert unknown.json()["status"] == "not_found"
        assert malformed.status_code == 200
        assert malformed.json()["status"] == "malformed"
        assert malformed.json()["display_name"] is None

    def test_oversized_payload_is_malformed(self, admin_client):
        """Long decoder output still gets an outcome instead of a validation error."""
        response = admin_client.post("/api/v1/checkins", json={"code": "A" * 2000})

        assert response.status_code == 200
        assert response.json()["status"] == "malformed"

    def test_event_bound_scan(self, admin_client, event, make_invite):
        invite = make_invite(event)

        response = admin_client.post(
            "/api/v1/checkins",
            json={"code": invite.qr_token, "event_id": str(uuid.uuid4())},
        )

        assert response.json()["status"] == "not_found"

    def test_persistence_failure_is_503(self, admin_client, monkeypatch):
        from app.api.v1.endpoints import checkins

        monkeypatch.setattr(
            checkins,
            "resolve",
            lambda db, code, event_id=None: CheckinOutcome(
                status=CheckinStatus.PERSISTENCE_FAILURE, reason="Check-in could not be saved"
            ),
        )

        response = admin_client.post("/api/v1/checkins", json={"code": str(uuid.uuid4())})

        assert response.status_code == 503
        assert response.json()["status"] == "persistence_failure"
        assert response.json()["admitted"] is False


@pytest.mark.integration
class TestScanSessionsAPI:
    """Door scan sessions."""

    def test_scan_acknowledge_cycle(self, admin_client, event, make_invite):
        invite = make_invite(event)
        session = admin_client.post("/api/v1/scan-sessions", json={"event_id": str(event.id)})
        assert session.status_code == 201
        session_id = session.json()["id"]
        assert session.json()["state"] == "waiting"

        scanned = admin_client.post(f"/api/v1/scan-sessions/{session_id}/scans", json={"code": invite.qr_token})
        assert scanned.status_code == 200
        assert scanned.json()["state"] == "showing"
        assert scanned.json()["outcome"]["status"] == "first_check_in"

        # Same code still in front of the camera
        busy = admin_client.post(f"/api/v1/scan-sessions/{session_id}/scans", json={"code": invite.qr_token})
        assert busy.status_code == 409

        shown = admin_client.get(f"/api/v1/scan-sessions/{session_id}")
        assert shown.json()["outcome"]["display_name"] == "General Invite"

        acked = admin_client.post(f"/api/v1/scan-sessions/{session_id}/acknowledge")
        assert acked.json()["state"] == "waiting"
        assert acked.json()["outcome"] is None

        again = admin_client.post(f"/api/v1/scan-sessions/{session_id}/scans", json={"code": invite.qr_token})
        assert again.json()["outcome"]["status"] == "repeat"
        assert again.json()["scans"] == 2

        assert admin_client.delete(f"/api/v1/scan-sessions/{session_id}").status_code == 200
        assert admin_client.get(f"/api/v1/scan-sessions/{session_id}").status_code == 404

    def test_oversized_payload_is_shown(self, admin_client):
        session_id = admin_client.post("/api/v1/scan-sessions", json={}).json()["id"]

        scanned = admin_client.post(f"/api/v1/scan-sessions/{session_id}/scans", json={"code": "A" * 2000})

        assert scanned.status_code == 200
        assert scanned.json()["state"] == "showing"
        assert scanned.json()["outcome"]["status"] == "malformed"

    def test_session_for_unknown_event(self, admin_client):
        response = admin_client.post("/api/v1/scan-sessions", json={"event_id": str(uuid.uuid4())})

        assert response.status_code == 404

    def test_unknown_session(self, admin_client):
        response = admin_client.post(f"/api/v1/scan-sessions/{uuid.uuid4()}/scans", json={"code": "x"})

        assert response.status_code == 404
