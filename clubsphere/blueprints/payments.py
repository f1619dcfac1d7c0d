"""Payments blueprint — checkout and payment confirmation.

Routes:
- POST /create-checkout-session — create a Stripe Checkout Session, return its URL
- POST /payment-success         — reconcile a completed session into records
- GET  /payments                — full payment ledger (admin)
- GET  /member-payments         — the caller's own payments (member)
"""

import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user

from clubsphere.decorators import auth_required, role_required
from clubsphere.errors import (
    DependencyUnavailable,
    InvalidPurchaseIntent,
    SessionNotFound,
)
from clubsphere.extensions import db, limiter
from clubsphere.models.club import Club, Event
from clubsphere.services import checkout_service, ledger_service
from clubsphere.services.purchase_intent import (
    KIND_EVENT_FEE,
    KIND_MEMBERSHIP,
    PurchaseIntent,
)
from clubsphere.services.reconciliation_service import (
    COMPLETED,
    reconcile_checkout_session,
)

logger = logging.getLogger(__name__)

payments_bp = Blueprint("payments", __name__)


def _payment_to_dict(entry):
    return {
        "id": entry.id,
        "transactionId": entry.transaction_id,
        "paymentType": entry.kind,
        "amount": float(entry.amount),
        "memberEmail": entry.buyer_email,
        "memberName": entry.buyer_name,
        "managerEmail": entry.owner_email,
        "clubId": entry.club_id,
        "clubName": entry.club_name,
        "eventId": entry.event_id,
        "status": entry.status,
        "paidAt": entry.paid_at.isoformat() if entry.paid_at else None,
    }


def _target_id(data, key):
    value = data.get(key)
    return value if isinstance(value, str) and value else None


def _price_from_catalog(data):
    """Overwrite the target's price and details in `data` from the store.

    Returns an error response for an unknown, unapproved or free target,
    else None. Missing ids and unknown kinds are left for PurchaseIntent
    validation to reject.
    """
    kind = data.get("kind")

    if kind == KIND_MEMBERSHIP:
        club_id = _target_id(data, "clubId")
        if club_id is None:
            return None
        club = db.session.get(Club, club_id)
        if club is None or club.status != "approved":
            return jsonify({"message": "Club not found"}), 404
        if club.is_free:
            return jsonify({"message": "This club does not require payment"}), 400
        data.update(
            amount=club.membership_fee,
            clubName=club.club_name,
            eventTitle="",
            description=club.description,
            bannerImage=club.banner_image,
            ownerEmail=club.manager_email,
        )

    elif kind == KIND_EVENT_FEE:
        event_id = _target_id(data, "eventId")
        if event_id is None:
            return None
        event = db.session.get(Event, event_id)
        club = event.club if event is not None else None
        if club is None or club.status != "approved":
            return jsonify({"message": "Event not found"}), 404
        if event.is_free:
            return jsonify({"message": "This event does not require payment"}), 400
        data.update(
            amount=event.event_fee,
            clubId=club.id,
            clubName=club.club_name,
            eventTitle=event.event_title,
            description=event.description,
            bannerImage=club.banner_image,
            ownerEmail=event.manager_email,
        )

    return None


# ──────────────────────────────────────────────
# POST /create-checkout-session
# ──────────────────────────────────────────────

@payments_bp.route("/create-checkout-session", methods=["POST"])
@limiter.limit("20 per minute")
@role_required("member")
def create_checkout_session():
    """Create a Checkout Session for a membership or event fee.

    The buyer is always the authenticated caller, and the price, names and
    owner always come from the club/event row; the body only selects the
    target.

    Returns {url} | 400 on an invalid intent or a free target | 404 for an
    unknown or unapproved target | 500 on Stripe failure.
    """
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        data = dict(data)
        data["buyerEmail"] = current_user.email
        data["buyerName"] = data.get("buyerName") or current_user.name
        error = _price_from_catalog(data)
        if error is not None:
            return error

    try:
        intent = PurchaseIntent.from_payload(data)
        url = checkout_service.create_session(intent)
    except InvalidPurchaseIntent as e:
        logger.info(f"Rejected checkout request from {current_user.email}: {e.message}")
        return jsonify({"message": "Invalid payment data", "field": e.field}), 400
    except DependencyUnavailable as e:
        logger.error(f"Checkout error: {e.message}")
        return jsonify({"message": "Failed to create checkout session"}), 500

    return jsonify({"url": url})


# ──────────────────────────────────────────────
# POST /payment-success
# ──────────────────────────────────────────────

@payments_bp.route("/payment-success", methods=["POST"])
@limiter.limit("30 per minute")
@auth_required
def payment_success():
    """Confirm a payment after the redirect back from Stripe.

    Idempotent: confirming the same session again (page reload, retry
    after an error) answers {success: true} without writing twice.
    Sessions that are unknown, unpaid, or paid by someone else answer
    {success: false}. Store/Stripe outages answer 500 and are safe to retry.
    """
    data = request.get_json(silent=True) or {}
    session_id = data.get("sessionId") if isinstance(data, dict) else None
    if not session_id or not isinstance(session_id, str):
        return jsonify({"success": False, "message": "sessionId is required"}), 400

    try:
        outcome = reconcile_checkout_session(session_id, caller_email=current_user.email)
    except SessionNotFound:
        logger.info(f"Payment confirmation for unknown session {session_id}")
        return jsonify({"success": False})
    except InvalidPurchaseIntent as e:
        logger.error(f"Session {session_id} carries unusable metadata: {e.message}")
        return jsonify({"success": False})
    except DependencyUnavailable as e:
        logger.error(f"Payment confirmation for {session_id} failed: {e.message}", exc_info=True)
        return jsonify({"success": False}), 500

    return jsonify({"success": outcome == COMPLETED})


# ──────────────────────────────────────────────
# Ledger views
# ──────────────────────────────────────────────

@payments_bp.route("/payments")
@role_required("admin")
def all_payments():
    """Every ledger entry, newest first."""
    entries = ledger_service.list_payments()
    return jsonify([_payment_to_dict(e) for e in entries])


@payments_bp.route("/member-payments")
@role_required("member")
def member_payments():
    """The caller's own ledger entries, newest first."""
    entries = ledger_service.list_payments(buyer_email=current_user.email)
    return jsonify([_payment_to_dict(e) for e in entries])
