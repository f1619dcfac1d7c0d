"""Payment ledger model.

Append-only. One row per distinct transaction_id (the Stripe payment
intent id); never mutated or deleted by the application. The UNIQUE
constraint on transaction_id is what makes concurrent confirmations of
the same payment collapse into a single row.
"""

import uuid
from datetime import datetime, timezone

from clubsphere.extensions import db


class LedgerEntry(db.Model):
    __tablename__ = "payments"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    transaction_id = db.Column(
        db.String(255), unique=True, nullable=False
    )  # e.g. "pi_3Abc..."
    kind = db.Column(db.String(20), nullable=False)  # membership | eventFee
    amount = db.Column(db.Numeric(10, 2), nullable=False)  # major units
    buyer_email = db.Column(db.String(255), nullable=False, index=True)
    buyer_name = db.Column(db.String(255))
    owner_email = db.Column(db.String(255), index=True)
    club_id = db.Column(db.String(36), nullable=False)
    club_name = db.Column(db.String(255))
    event_id = db.Column(db.String(36), nullable=True)
    status = db.Column(db.String(20), nullable=False, default="success")
    paid_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<LedgerEntry {self.transaction_id} {self.kind} {self.amount}>"
