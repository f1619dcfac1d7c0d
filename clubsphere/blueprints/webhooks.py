"""Webhooks blueprint — /stripe/webhooks

Receives Stripe webhook events. Raw body is required for signature
verification. Completed checkouts go through the same reconciliation as
the client's /payment-success call; whichever arrives second is absorbed
as a duplicate.
"""

import logging

from flask import Blueprint, request, jsonify
from sqlalchemy import exc

from clubsphere.errors import (
    DependencyUnavailable,
    InvalidPurchaseIntent,
    SessionNotFound,
)
from clubsphere.extensions import db
from clubsphere.models.stripe_event import StripeEvent
from clubsphere.services.checkout_service import verify_webhook_signature
from clubsphere.services.reconciliation_service import reconcile_checkout_session
from clubsphere.services.store import store_errors

logger = logging.getLogger(__name__)

webhooks_bp = Blueprint("webhooks", __name__, url_prefix="/stripe")

RECONCILE_EVENTS = (
    "checkout.session.completed",
    "checkout.session.async_payment_succeeded",
)


def _already_processed(event_id):
    with store_errors("stripe_events lookup"):
        return StripeEvent.query.filter_by(stripe_event_id=event_id).first() is not None


def _record_event(event_id, event_type, session_id):
    """Insert the processed-event row. Returns False if another delivery
    of the same event recorded it first."""
    with store_errors("stripe_events insert"):
        db.session.add(StripeEvent(
            stripe_event_id=event_id,
            event_type=event_type,
            checkout_session_id=session_id,
        ))
        try:
            db.session.commit()
        except exc.IntegrityError:
            db.session.rollback()
            return False
    return True


def handle_webhook_event(event):
    """Process a verified Stripe webhook event.

    Idempotency: checks stripe_events table before processing.
    If the event was already processed, returns immediately.

    Only store/Stripe outages fail the delivery (so Stripe retries).
    Sessions that don't exist or carry metadata we didn't write can
    never succeed on retry; they are logged and acknowledged.

    Returns (success: bool, message: str).
    """
    event_id = event["id"]
    event_type = event["type"]

    try:
        if _already_processed(event_id):
            logger.info(f"Duplicate webhook event {event_id}, skipping")
            return True, "already_processed"

        session_id = None
        if event_type in RECONCILE_EVENTS:
            session_id = event["data"]["object"].get("id")
            try:
                outcome = reconcile_checkout_session(session_id)
                logger.info(f"Webhook {event_id}: session {session_id} -> {outcome}")
            except SessionNotFound as e:
                logger.warning(f"Webhook {event_id}: {e.message}")
            except InvalidPurchaseIntent as e:
                logger.error(
                    f"Webhook {event_id}: session {session_id} carries unusable "
                    f"metadata, not reconciled: {e.message}"
                )

        # --- Record event for idempotency ---
        if not _record_event(event_id, event_type, session_id):
            logger.info(f"Webhook event {event_id} recorded by a concurrent delivery")
            return True, "already_processed"
    except DependencyUnavailable as e:
        logger.error(f"Error handling {event_type} ({event_id}): {e.message}", exc_info=True)
        return False, "reconciliation_failed"

    return True, "processed"


@webhooks_bp.route("/webhooks", methods=["POST"])
def stripe_webhook():
    """Receive and process Stripe webhook events.

    1. Get raw body (required for signature verification)
    2. Verify signature with STRIPE_WEBHOOK_SECRET
    3. Pass to handle_webhook_event (idempotent via stripe_events table)
    4. Return 200 to acknowledge receipt; 500 makes Stripe retry
    """
    payload = request.get_data(as_text=True)
    sig_header = request.headers.get("Stripe-Signature")

    if not sig_header:
        logger.warning("Webhook received without Stripe-Signature header")
        return jsonify({"error": "Missing signature"}), 400

    # --- Verify signature ---
    try:
        event = verify_webhook_signature(payload, sig_header)
    except Exception as e:
        logger.warning(f"Webhook signature verification failed: {e}")
        return jsonify({"error": "Invalid signature"}), 400

    success, message = handle_webhook_event(event)

    if success:
        return jsonify({"status": message}), 200
    logger.error(f"Webhook processing failed: {message}")
    return jsonify({"error": message}), 500
