"""Grant models.

- MembershipGrant: an identity holds membership in a club.
- RegistrationGrant: an identity is registered for an event.

Each is keyed by transaction_id (UNIQUE within its own table). Paid grants
share the id of their ledger entry; free grants use a derived
"free:<target>:<email>" key. Clubs and events are referenced by id only.
"""

import uuid
from datetime import datetime, timezone

from clubsphere.extensions import db


class MembershipGrant(db.Model):
    __tablename__ = "memberships"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    transaction_id = db.Column(db.String(255), unique=True, nullable=False)
    club_id = db.Column(db.String(36), nullable=False, index=True)
    club_name = db.Column(db.String(255))
    buyer_email = db.Column(db.String(255), nullable=False, index=True)
    buyer_name = db.Column(db.String(255))
    owner_email = db.Column(db.String(255), index=True)
    status = db.Column(db.String(20), nullable=False, default="active")
    joined_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<MembershipGrant {self.buyer_email} -> club {self.club_id}>"


class RegistrationGrant(db.Model):
    __tablename__ = "event_registrations"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    transaction_id = db.Column(db.String(255), unique=True, nullable=False)
    event_id = db.Column(db.String(36), nullable=False, index=True)
    event_title = db.Column(db.String(255))
    club_id = db.Column(db.String(36), nullable=False)
    club_name = db.Column(db.String(255))
    buyer_email = db.Column(db.String(255), nullable=False, index=True)
    buyer_name = db.Column(db.String(255))
    owner_email = db.Column(db.String(255), index=True)
    status = db.Column(db.String(20), nullable=False, default="registered")
    registered_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<RegistrationGrant {self.buyer_email} -> event {self.event_id}>"
