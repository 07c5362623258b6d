"""Integration tests for events, templates and invites API."""
import io
import zipfile

import pytest
from PIL import Image


@pytest.mark.integration
class TestEventsAPI:
    """Event endpoints."""

    def test_create_get_update_delete(self, admin_client):
        created = admin_client.post(
            "/api/v1/events",
            json={"title": "Spring Gala", "date": "2026-04-18T19:00:00Z", "qr_position_y": 0.8},
        )
        assert created.status_code == 201
        event_id = created.json()["id"]
        assert created.json()["has_image"] is False

        fetched = admin_client.get(f"/api/v1/events/{event_id}")
        assert fetched.json()["qr_position_y"] == 0.8

        patched = admin_client.patch(f"/api/v1/events/{event_id}", json={"subtitle": "Black tie", "address": None})
        assert patched.status_code == 200
        assert patched.json()["subtitle"] == "Black tie"

        deleted = admin_client.delete(f"/api/v1/events/{event_id}")
        assert deleted.status_code == 200
        assert admin_client.get(f"/api/v1/events/{event_id}").status_code == 404

    def test_create_rejects_bad_placement(self, admin_client):
        response = admin_client.post(
            "/api/v1/events",
            json={"title": "Gala", "date": "2026-04-18T19:00:00Z", "qr_size": 0},
        )

        assert response.status_code == 422

    def test_create_rejects_expiration_before_date(self, admin_client):
        response = admin_client.post(
            "/api/v1/events",
            json={
                "title": "Gala",
                "date": "2026-04-18T19:00:00Z",
                "expiration_date": "2026-04-18T18:00:00Z",
            },
        )

        assert response.status_code == 422

    def test_create_with_unknown_template(self, admin_client):
        response = admin_client.post(
            "/api/v1/events",
            json={
                "title": "Gala",
                "date": "2026-04-18T19:00:00Z",
                "template_id": "00000000-0000-4000-8000-000000000000",
            },
        )

        assert response.status_code == 404

    def test_image_upload(self, admin_client, event, background_png):
        response = admin_client.put(
            f"/api/v1/events/{event.id}/image",
            files={"file": ("bg.png", background_png, "image/png")},
        )
        assert response.status_code == 200
        assert response.json()["has_image"] is True

        cleared = admin_client.delete(f"/api/v1/events/{event.id}/image")
        assert cleared.json()["has_image"] is False

    def test_image_upload_rejects_garbage(self, admin_client, event):
        response = admin_client.put(
            f"/api/v1/events/{event.id}/image",
            files={"file": ("bg.png", b"not an image", "image/png")},
        )

        assert response.status_code == 400

    def test_stats(self, admin_client, event, make_invite):
        make_invite(event, checkins=2)
        make_invite(event)

        response = admin_client.get(f"/api/v1/events/{event.id}/stats")

        assert response.json() == {"total_invites": 2, "checked_in": 1, "remaining": 1, "total_checkins": 2}


@pytest.mark.integration
class TestInvitesAPI:
    """Invite endpoints."""

    def test_invite_contacts(self, admin_client, event, contact):
        response = admin_client.post(
            f"/api/v1/events/{event.id}/invites",
            json={"contact_ids": [str(contact.id)], "max_checkins": 2},
        )

        assert response.status_code == 201
        invite = response.json()[0]
        assert invite["display_name"] == "Ada Lovelace"
        assert invite["qr_token"] == invite["id"]
        assert invite["checkin_count"] == 0
        assert invite["has_reached_limit"] is False

    def test_invite_unknown_contact(self, admin_client, event):
        response = admin_client.post(
            f"/api/v1/events/{event.id}/invites",
            json={"contact_ids": ["00000000-0000-4000-8000-000000000000"]},
        )

        assert response.status_code == 404

    def test_blank_invites(self, admin_client, event):
        response = admin_client.post(f"/api/v1/events/{event.id}/invites/blank", json={"quantity": 2})

        assert response.status_code == 201
        assert [i["display_name"] for i in response.json()] == ["General Invite #1", "General Invite #2"]

        listed = admin_client.get(f"/api/v1/events/{event.id}/invites")
        assert len(listed.json()) == 2

    def test_update_and_delete(self, admin_client, event, make_invite):
        invite = make_invite(event, max_checkins=1, checkins=1)

        patched = admin_client.patch(f"/api/v1/invites/{invite.id}", json={"max_checkins": 3})
        assert patched.json()["has_reached_limit"] is False

        assert admin_client.delete(f"/api/v1/invites/{invite.id}").status_code == 200
        assert admin_client.get(f"/api/v1/invites/{invite.id}").status_code == 404


@pytest.mark.integration
class TestTemplatesAPI:
    """Template endpoints."""

    def test_create_and_use_template(self, admin_client, background_png):
        response = admin_client.post(
            "/api/v1/templates",
            data={"name": "Classic", "qr_position_y": "0.75"},
            files={"file": ("bg.png", background_png, "image/png")},
        )
        assert response.status_code == 201
        template_id = response.json()["id"]
        assert response.json()["qr_position_y"] == 0.75

        event = admin_client.post(
            "/api/v1/events",
            json={"title": "Templated", "date": "2026-04-18T19:00:00Z", "template_id": template_id},
        )
        assert event.json()["template_id"] == template_id

        assert admin_client.delete(f"/api/v1/templates/{template_id}").status_code == 200
        refreshed = admin_client.get(f"/api/v1/events/{event.json()['id']}")
        assert refreshed.json()["template_id"] is None

    def test_update_template(self, admin_client, background_png):
        template_id = admin_client.post(
            "/api/v1/templates",
            data={"name": "Classic"},
            files={"file": ("bg.png", background_png, "image/png")},
        ).json()["id"]

        response = admin_client.patch(f"/api/v1/templates/{template_id}", json={"qr_size": 0.5})

        assert response.status_code == 200
        assert response.json()["qr_size"] == 0.5


@pytest.mark.integration
class TestCardsAPI:
    """Card download and bulk export."""

    def test_card_jpeg(self, admin_client, db_session, event, contact, make_invite, background_png):
        event.image_data = background_png
        db_session.commit()
        invite = make_invite(event, contact)

        response = admin_client.get(f"/api/v1/invites/{invite.id}/card")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        card = Image.open(io.BytesIO(response.content))
        assert card.size == (400, 200)
        assert card.getexif()[0x010E] == "Invitation for Ada Lovelace"

    def test_card_png_without_background(self, admin_client, event, make_invite):
        invite = make_invite(event)

        response = admin_client.get(f"/api/v1/invites/{invite.id}/card", params={"format": "png"})

        assert response.headers["content-type"] == "image/png"
        assert Image.open(io.BytesIO(response.content)).text["Title"] == "Spring Gala"

    def test_card_unavailable(self, admin_client, db_session, event, make_invite):
        event.image_data = b"corrupt"
        db_session.commit()
        invite = make_invite(event)

        response = admin_client.get(f"/api/v1/invites/{invite.id}/card")

        assert response.status_code == 422

    def test_card_bad_format(self, admin_client, event, make_invite):
        invite = make_invite(event)

        response = admin_client.get(f"/api/v1/invites/{invite.id}/card", params={"format": "gif"})

        assert response.status_code == 400

    def test_export_zip(self, admin_client, event, contact, make_invite):
        make_invite(event, contact)
        make_invite(event, contact_name="Plus One")

        response = admin_client.post(f"/api/v1/events/{event.id}/export", json={})

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert response.headers["X-Export-Count"] == "2"
        assert response.headers["X-Export-Failed"] == "0"
        assert 'filename="Spring Gala-invitations.zip"' in response.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
            assert archive.namelist() == ["Ada Lovelace_1.jpg", "Plus One_2.jpg"]

    def test_export_selected_invites(self, admin_client, event, make_invite):
        wanted = make_invite(event, contact_name="Wanted")
        make_invite(event, contact_name="Skipped")

        response = admin_client.post(
            f"/api/v1/events/{event.id}/export",
            json={"invite_ids": [str(wanted.id)]},
        )

        assert response.headers["X-Export-Count"] == "1"

    def test_export_without_invites(self, admin_client, event):
        response = admin_client.post(f"/api/v1/events/{event.id}/export", json={})

        assert response.status_code == 400

    def test_export_all_cards_unavailable(self, admin_client, db_session, event, make_invite):
        event.image_data = b"corrupt"
        db_session.commit()
        make_invite(event)

        response = admin_client.post(f"/api/v1/events/{event.id}/export", json={})

        assert response.status_code == 422
