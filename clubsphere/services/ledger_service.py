"""Ledger service — the payments collection.

The ledger is the single source of truth for "was this payment ever
seen". Rows are only ever added, once per transaction id.
"""

import logging

from clubsphere.models.payment import LedgerEntry
from clubsphere.services.store import insert_if_absent, store_errors

logger = logging.getLogger(__name__)


def record_if_absent(transaction_id, kind, amount, buyer_email, club_id,
                     buyer_name=None, owner_email=None, club_name=None,
                     event_id=None):
    """Append a successful payment unless transaction_id is already recorded.

    Returns True if the entry was inserted, False on a duplicate
    (redelivered webhook, reloaded success page, concurrent confirmation).
    """
    return insert_if_absent(
        LedgerEntry,
        transaction_id,
        kind=kind,
        amount=amount,
        buyer_email=buyer_email,
        buyer_name=buyer_name,
        owner_email=owner_email,
        club_id=club_id,
        club_name=club_name,
        event_id=event_id or None,
        status="success",
    )


def list_payments(buyer_email=None):
    """All ledger entries, newest first; optionally only one buyer's."""
    with store_errors("payments listing"):
        query = LedgerEntry.query
        if buyer_email:
            query = query.filter_by(buyer_email=buyer_email)
        return query.order_by(LedgerEntry.paid_at.desc()).all()
