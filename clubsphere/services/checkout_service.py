"""Checkout service — all Stripe API calls.

Responsible for:
- Creating Stripe Checkout Sessions from a PurchaseIntent
- Retrieving a session's status, amount, metadata and payment intent
- Verifying webhook signatures
- Translating stripe.error.* into the application's error taxonomy
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

import stripe
from flask import current_app

from clubsphere.errors import (
    DependencyTimeout,
    DependencyUnavailable,
    SessionNotFound,
)
from clubsphere.services.purchase_intent import KIND_MEMBERSHIP

logger = logging.getLogger(__name__)

SESSION_OPEN = "open"
SESSION_COMPLETE = "complete"
SESSION_EXPIRED = "expired"

# payment_status values that mean the money has arrived (or none was due).
# "unpaid" on a complete session is a delayed method still settling.
SETTLED_PAYMENT_STATUSES = ("paid", "no_payment_required")


@dataclass
class CheckoutSession:
    """Read-only view of a Stripe Checkout Session."""

    id: str
    status: str
    amount_major_units: Decimal = None
    metadata: dict = field(default_factory=dict)
    payment_intent_id: str = None
    payment_status: str = None

    @property
    def is_complete(self):
        return self.status == SESSION_COMPLETE

    @property
    def is_settled(self):
        """Complete and paid. Only settled sessions are reconciled."""
        return self.is_complete and self.payment_status in SETTLED_PAYMENT_STATUSES


def init_checkout_provider(app):
    """Bound every Stripe call: request timeout + retry budget."""
    stripe.max_network_retries = app.config["STRIPE_MAX_NETWORK_RETRIES"]
    stripe.default_http_client = stripe.RequestsClient(
        timeout=app.config["STRIPE_TIMEOUT_SECONDS"]
    )


def _translate_stripe_error(e, action):
    """Map a StripeError to DependencyUnavailable / DependencyTimeout."""
    if isinstance(e, stripe.error.APIConnectionError) and "timed out" in str(e).lower():
        return DependencyTimeout(f"Stripe timed out during {action}", dependency="stripe")
    return DependencyUnavailable(f"Stripe failed during {action}: {e}", dependency="stripe")


# ──────────────────────────────────────────────
# Checkout Sessions
# ──────────────────────────────────────────────

def _redirect_urls(intent):
    """Success lands on the shared confirmation page; cancel goes back to
    the club or event the buyer came from."""
    client_domain = current_app.config["CLIENT_DOMAIN"].rstrip("/")
    success_url = (
        f"{client_domain}/dashboard/payment-success"
        f"?session_id={{CHECKOUT_SESSION_ID}}"
    )
    if intent.kind == KIND_MEMBERSHIP:
        cancel_url = f"{client_domain}/dashboard/club-details/{intent.club_id}"
    else:
        cancel_url = f"{client_domain}/dashboard/event-details/{intent.event_id}"
    return success_url, cancel_url


def create_session(intent):
    """Create a one-off payment Checkout Session for a validated intent.

    The whole intent rides along as session metadata; confirmation reads
    it back from there. No deduplication here: two calls create two
    sessions.

    Returns the Stripe-hosted checkout URL.
    Raises InvalidPurchaseIntent if the intent can't be encoded,
    DependencyUnavailable / DependencyTimeout on Stripe failures.
    """
    intent.validate()
    metadata = intent.to_metadata()
    success_url, cancel_url = _redirect_urls(intent)

    product_data = {"name": intent.product_name}
    if intent.description:
        product_data["description"] = intent.description
    if intent.banner_image:
        product_data["images"] = [intent.banner_image]

    stripe.api_key = current_app.config["STRIPE_SECRET_KEY"]
    try:
        session = stripe.checkout.Session.create(
            mode="payment",
            customer_email=intent.buyer_email,
            line_items=[
                {
                    "price_data": {
                        "currency": current_app.config["CHECKOUT_CURRENCY"],
                        "product_data": product_data,
                        "unit_amount": intent.amount_minor_units,
                    },
                    "quantity": 1,
                }
            ],
            metadata=metadata,
            payment_intent_data={"metadata": metadata},
            success_url=success_url,
            cancel_url=cancel_url,
        )
    except stripe.error.StripeError as e:
        logger.error(f"Checkout session creation failed for {intent.buyer_email}: {e}")
        raise _translate_stripe_error(e, "session creation") from e

    logger.info(
        f"Created checkout session {session.id} ({intent.kind}, "
        f"club={intent.club_id}, event={intent.event_id or '-'}) for {intent.buyer_email}"
    )
    return session.url


def _payment_intent_id(session):
    """payment_intent is an id string, or an object when expanded."""
    payment_intent = session.get("payment_intent")
    if payment_intent is None or isinstance(payment_intent, str):
        return payment_intent
    return payment_intent.get("id")


def get_session_result(session_id):
    """Retrieve a Checkout Session by id.

    Returns a CheckoutSession.
    Raises SessionNotFound if Stripe has no such session,
    DependencyUnavailable / DependencyTimeout on other Stripe failures.
    """
    if not session_id:
        raise SessionNotFound("empty session id")

    stripe.api_key = current_app.config["STRIPE_SECRET_KEY"]
    try:
        session = stripe.checkout.Session.retrieve(session_id)
    except stripe.error.InvalidRequestError as e:
        if getattr(e, "code", None) == "resource_missing" or "No such checkout" in str(e):
            raise SessionNotFound(f"No such checkout session: {session_id}") from e
        raise _translate_stripe_error(e, "session retrieval") from e
    except stripe.error.StripeError as e:
        logger.error(f"Checkout session retrieval failed for {session_id}: {e}")
        raise _translate_stripe_error(e, "session retrieval") from e

    amount_total = session.get("amount_total")
    amount = None
    if amount_total is not None:
        amount = (Decimal(amount_total) / 100).quantize(Decimal("0.01"))

    return CheckoutSession(
        id=session.get("id") or session_id,
        status=session.get("status"),
        amount_major_units=amount,
        metadata=dict(session.get("metadata") or {}),
        payment_intent_id=_payment_intent_id(session),
        payment_status=session.get("payment_status"),
    )


# ──────────────────────────────────────────────
# Webhooks
# ──────────────────────────────────────────────

def verify_webhook_signature(payload, sig_header):
    """Verify Stripe webhook signature and construct the event.

    Returns the verified Stripe event object.
    Raises stripe.error.SignatureVerificationError on invalid signature.
    """
    webhook_secret = current_app.config["STRIPE_WEBHOOK_SECRET"]
    return stripe.Webhook.construct_event(payload, sig_header, webhook_secret)
