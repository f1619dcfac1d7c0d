"""Shared test fixtures for the ClubSphere test suite.

Provides:
- app: Flask app configured for testing (in-memory SQLite, no rate limits)
- db_session: clean database per test (tables created/dropped)
- app_ctx: an application context for calling services directly
- client: Flask test client
- seed_data: users for every role (plus a demo account), paid and free
  clubs and events
- auth_headers: bearer-token headers for a seeded user
- make_session: builds Stripe-shaped Checkout Session payloads
"""

from decimal import Decimal

import pytest
from werkzeug.security import generate_password_hash

from clubsphere import create_app
from clubsphere.extensions import db as _db
from clubsphere.models.club import Club, Event
from clubsphere.models.user import User
from clubsphere.services.auth_service import issue_token
from clubsphere.services.purchase_intent import PurchaseIntent


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")
    yield app


@pytest.fixture(autouse=True)
def db_session(app):
    """Create all tables before each test, drop after.

    No app context is held open across the test, so every client request
    gets its own `g` (and its own bearer identity).
    """
    with app.app_context():
        _db.create_all()
    yield _db
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def app_ctx(app):
    """Application context for tests that call services directly."""
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def seed_data(app):
    """Seed users, clubs and events. Returns plain ids/emails."""
    with app.app_context():
        users = [
            ("admin@club.test", "Ada Admin", "admin"),
            ("manager@club.test", "Max Manager", "manager"),
            ("a@x.com", "Ava Buyer", "member"),
            ("b@x.com", "Ben Other", "member"),
            ("member@sphere.com", "Demo Member", "member"),
        ]
        for email, name, role in users:
            _db.session.add(User(
                email=email,
                password_hash=generate_password_hash("password123"),
                name=name,
                role=role,
            ))

        paid_club = Club(
            club_name="Chess Club",
            membership_fee=Decimal("25.00"),
            manager_email="manager@club.test",
            status="approved",
        )
        free_club = Club(
            club_name="Running Club",
            membership_fee=Decimal("0"),
            manager_email="manager@club.test",
            status="approved",
        )
        _db.session.add_all([paid_club, free_club])
        _db.session.flush()

        paid_event = Event(
            club_id=paid_club.id,
            event_title="Spring Open",
            is_paid=True,
            event_fee=Decimal("10.00"),
            manager_email="manager@club.test",
        )
        free_event = Event(
            club_id=free_club.id,
            event_title="Park Run",
            is_paid=False,
            event_fee=Decimal("0"),
            manager_email="manager@club.test",
        )
        _db.session.add_all([paid_event, free_event])
        _db.session.commit()

        return {
            "admin_email": "admin@club.test",
            "manager_email": "manager@club.test",
            "buyer_email": "a@x.com",
            "other_email": "b@x.com",
            "demo_email": "member@sphere.com",
            "club_id": paid_club.id,
            "free_club_id": free_club.id,
            "event_id": paid_event.id,
            "free_event_id": free_event.id,
        }


@pytest.fixture
def auth_headers(app):
    """Return a function email -> {"Authorization": "Bearer ..."}."""

    def _headers(email):
        with app.app_context():
            user = User.query.filter_by(email=email).first()
            return {"Authorization": f"Bearer {issue_token(user)}"}

    return _headers


@pytest.fixture
def make_session(seed_data):
    """Build a Stripe-shaped checkout session dict for a seeded target."""

    def _make(kind="membership", status="complete", session_id="cs_test_001",
              payment_intent="pi_test_001", amount="25.00",
              buyer_email=None, payment_status="paid", **overrides):
        intent = PurchaseIntent(
            kind=kind,
            club_id=seed_data["club_id"],
            club_name="Chess Club",
            event_id=seed_data["event_id"] if kind == "eventFee" else "",
            event_title="Spring Open" if kind == "eventFee" else "",
            amount=Decimal(amount),
            buyer_email=buyer_email or seed_data["buyer_email"],
            buyer_name="Ava Buyer",
            owner_email=seed_data["manager_email"],
        )
        session = {
            "id": session_id,
            "object": "checkout.session",
            "status": status,
            "payment_status": payment_status,
            "amount_total": int(Decimal(amount) * 100),
            "payment_intent": payment_intent,
            "metadata": intent.to_metadata(),
        }
        session.update(overrides)
        return session

    return _make
