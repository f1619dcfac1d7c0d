"""Reconciliation service — turns a completed Checkout Session into records.

Flow for one session id:

    fetch  ->  not complete and paid?    NOT_COMPLETE (no writes)
    parse  ->  metadata -> PurchaseIntent, transaction id = payment intent
    check  ->  caller is not the buyer?  BUYER_MISMATCH (no writes)
    ledger ->  record_if_absent (always attempted)
    grant  ->  membership | registration if absent
               counter +1 only when this call inserted the grant
    done   ->  COMPLETED

Every write is independently idempotent on the transaction id, so the
whole flow is safe to repeat: a retry after a partial failure fills in
whatever is missing and never double-counts. There is no cross-table
rollback; a ledger entry without its grant is repaired by the next
confirmation of the same session.
"""

import logging

from clubsphere.services import checkout_service, grant_service, ledger_service
from clubsphere.services.purchase_intent import KIND_MEMBERSHIP, PurchaseIntent

logger = logging.getLogger(__name__)

COMPLETED = "completed"
NOT_COMPLETE = "not_complete"
BUYER_MISMATCH = "buyer_mismatch"


def reconcile_checkout_session(session_id, caller_email=None):
    """Reconcile one Checkout Session. Returns an outcome constant.

    caller_email: the authenticated identity confirming the payment. When
    given it must match the buyer the session was created for. Webhook
    deliveries pass None.

    Raises SessionNotFound, InvalidPurchaseIntent (metadata not ours or
    corrupt), DependencyUnavailable / DependencyTimeout.
    """
    session = checkout_service.get_session_result(session_id)
    if not session.is_settled:
        logger.info(
            f"Session {session_id} is {session.status}/{session.payment_status}, "
            f"nothing to reconcile"
        )
        return NOT_COMPLETE

    intent = PurchaseIntent.from_metadata(session.metadata)

    if caller_email is not None and caller_email.lower() != intent.buyer_email:
        logger.warning(
            f"Session {session_id} confirmed by {caller_email} "
            f"but was paid for by {intent.buyer_email}"
        )
        return BUYER_MISMATCH

    # Sessions without a payment intent (fully discounted) fall back to
    # the session id, which is just as unique.
    transaction_id = session.payment_intent_id or session.id
    amount = session.amount_major_units
    if amount is None:
        amount = intent.amount

    ledger_service.record_if_absent(
        transaction_id=transaction_id,
        kind=intent.kind,
        amount=amount,
        buyer_email=intent.buyer_email,
        buyer_name=intent.buyer_name,
        owner_email=intent.owner_email,
        club_id=intent.club_id,
        club_name=intent.club_name,
        event_id=intent.event_id,
    )

    if intent.kind == KIND_MEMBERSHIP:
        inserted = grant_service.grant_membership_if_absent(
            transaction_id=transaction_id,
            club_id=intent.club_id,
            buyer_email=intent.buyer_email,
            buyer_name=intent.buyer_name,
            owner_email=intent.owner_email,
            club_name=intent.club_name,
        )
        if inserted:
            grant_service.increment_club_members(intent.club_id)
    else:
        inserted = grant_service.grant_registration_if_absent(
            transaction_id=transaction_id,
            event_id=intent.event_id,
            club_id=intent.club_id,
            buyer_email=intent.buyer_email,
            buyer_name=intent.buyer_name,
            owner_email=intent.owner_email,
            event_title=intent.event_title,
            club_name=intent.club_name,
        )
        if inserted:
            grant_service.increment_event_registrations(intent.event_id)

    if not inserted:
        logger.info(f"Session {session_id} ({transaction_id}) was already reconciled")
    return COMPLETED
