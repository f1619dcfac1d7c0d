"""Club and event models.

Both carry denormalized display counters (member_count, event_count,
registration_count). Counters are only ever moved with a single atomic
UPDATE, see grant_service.
"""

import uuid

from clubsphere.extensions import db


class Club(db.Model):
    __tablename__ = "clubs"

    STATUSES = ["pending", "approved", "rejected"]

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    club_name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    category = db.Column(db.String(100))
    location = db.Column(db.String(255))
    banner_image = db.Column(db.String(1024))
    membership_fee = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    manager_email = db.Column(db.String(255), nullable=False, index=True)
    status = db.Column(
        db.String(20), nullable=False, default="pending"
    )  # pending | approved | rejected
    member_count = db.Column(db.Integer, nullable=False, default=0)
    event_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    # --- Relationships ---
    events = db.relationship("Event", back_populates="club", lazy="dynamic")

    @property
    def is_free(self):
        return not self.membership_fee or self.membership_fee <= 0

    def __repr__(self):
        return f"<Club {self.club_name} ({self.status})>"


class Event(db.Model):
    __tablename__ = "events"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    club_id = db.Column(
        db.String(36), db.ForeignKey("clubs.id"), nullable=False, index=True
    )
    event_title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    location = db.Column(db.String(255))
    event_date = db.Column(db.DateTime(timezone=True))
    is_paid = db.Column(db.Boolean, nullable=False, default=False)
    event_fee = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    manager_email = db.Column(db.String(255), nullable=False, index=True)
    registration_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    # --- Relationships ---
    club = db.relationship("Club", back_populates="events")

    @property
    def is_free(self):
        return not self.is_paid or not self.event_fee or self.event_fee <= 0

    def __repr__(self):
        return f"<Event {self.event_title}>"
