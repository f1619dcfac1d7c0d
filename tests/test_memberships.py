"""Tests for the memberships blueprint.

Covers:
- GET /is-member and /is-registered after paid and free grants
- POST /free-membership and /free-registration (validation, paid targets
  rejected, joining twice counts once, demo writes blocked)
"""

from unittest.mock import patch

from clubsphere.extensions import db
from clubsphere.models.club import Club, Event
from clubsphere.models.grant import MembershipGrant

RETRIEVE = "clubsphere.services.checkout_service.stripe.checkout.Session.retrieve"


class TestGrantLookups:
    """GET /is-member/<club_id> and GET /is-registered/<event_id>."""

    def test_not_member_before_payment(self, client, seed_data, auth_headers):
        resp = client.get(
            f"/is-member/{seed_data['club_id']}", headers=auth_headers("a@x.com")
        )
        assert resp.status_code == 200
        assert resp.get_json() == {"isMember": False}

    @patch(RETRIEVE)
    def test_member_after_payment(self, mock_retrieve, client, seed_data,
                                  auth_headers, make_session):
        mock_retrieve.return_value = make_session()
        headers = auth_headers("a@x.com")
        client.post("/payment-success", json={"sessionId": "cs_test_001"}, headers=headers)

        resp = client.get(f"/is-member/{seed_data['club_id']}", headers=headers)
        assert resp.get_json() == {"isMember": True}

        other = client.get(
            f"/is-member/{seed_data['club_id']}", headers=auth_headers("b@x.com")
        )
        assert other.get_json() == {"isMember": False}

    @patch(RETRIEVE)
    def test_registered_after_event_payment(self, mock_retrieve, client, seed_data,
                                            auth_headers, make_session):
        mock_retrieve.return_value = make_session(kind="eventFee", amount="10.00")
        headers = auth_headers("a@x.com")
        client.post("/payment-success", json={"sessionId": "cs_test_001"}, headers=headers)

        resp = client.get(f"/is-registered/{seed_data['event_id']}", headers=headers)
        assert resp.get_json() == {"isRegistered": True}

    def test_lookup_requires_auth(self, client, seed_data):
        resp = client.get(f"/is-member/{seed_data['club_id']}")
        assert resp.status_code == 401


class TestFreeMembership:
    """POST /free-membership."""

    def test_join_free_club(self, client, app, seed_data, auth_headers):
        headers = auth_headers("a@x.com")

        first = client.post(
            "/free-membership", json={"clubId": seed_data["free_club_id"]}, headers=headers
        )
        second = client.post(
            "/free-membership", json={"clubId": seed_data["free_club_id"]}, headers=headers
        )

        assert first.get_json() == {"success": True, "created": True}
        assert second.get_json() == {"success": True, "created": False}
        with app.app_context():
            assert MembershipGrant.query.filter_by(buyer_email="a@x.com").count() == 1
            assert db.session.get(Club, seed_data["free_club_id"]).member_count == 1

    def test_paid_club_rejected(self, client, app, seed_data, auth_headers):
        resp = client.post(
            "/free-membership",
            json={"clubId": seed_data["club_id"]},
            headers=auth_headers("a@x.com"),
        )
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "This club requires payment"
        with app.app_context():
            assert MembershipGrant.query.count() == 0

    def test_unapproved_club_not_found(self, client, app, seed_data, auth_headers):
        with app.app_context():
            club = db.session.get(Club, seed_data["free_club_id"])
            club.status = "pending"
            db.session.commit()

        resp = client.post(
            "/free-membership",
            json={"clubId": seed_data["free_club_id"]},
            headers=auth_headers("a@x.com"),
        )
        assert resp.status_code == 404

    def test_missing_club_id(self, client, seed_data, auth_headers):
        resp = client.post("/free-membership", json={}, headers=auth_headers("a@x.com"))
        assert resp.status_code == 400

    def test_manager_forbidden(self, client, seed_data, auth_headers):
        resp = client.post(
            "/free-membership",
            json={"clubId": seed_data["free_club_id"]},
            headers=auth_headers(seed_data["manager_email"]),
        )
        assert resp.status_code == 403
        assert resp.get_json()["message"] == "Member only actions!"

    def test_demo_member_blocked(self, client, app, seed_data, auth_headers):
        resp = client.post(
            "/free-membership",
            json={"clubId": seed_data["free_club_id"]},
            headers=auth_headers(seed_data["demo_email"]),
        )
        assert resp.status_code == 200
        assert resp.get_json()["isDemo"] is True
        with app.app_context():
            assert MembershipGrant.query.count() == 0


class TestFreeRegistration:
    """POST /free-registration."""

    def test_register_for_free_event(self, client, app, seed_data, auth_headers):
        resp = client.post(
            "/free-registration",
            json={"eventId": seed_data["free_event_id"]},
            headers=auth_headers("b@x.com"),
        )
        assert resp.get_json() == {"success": True, "created": True}
        with app.app_context():
            assert db.session.get(Event, seed_data["free_event_id"]).registration_count == 1

    def test_paid_event_rejected(self, client, seed_data, auth_headers):
        resp = client.post(
            "/free-registration",
            json={"eventId": seed_data["event_id"]},
            headers=auth_headers("b@x.com"),
        )
        assert resp.status_code == 400

    def test_unknown_event(self, client, seed_data, auth_headers):
        resp = client.post(
            "/free-registration",
            json={"eventId": "no-such-event"},
            headers=auth_headers("b@x.com"),
        )
        assert resp.status_code == 404
