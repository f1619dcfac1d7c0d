"""Memberships blueprint — grant lookups and free joins.

Routes:
- GET  /is-member/<club_id>       — {isMember} for the caller
- GET  /is-registered/<event_id>  — {isRegistered} for the caller
- POST /free-membership           — join a zero-fee club (member)
- POST /free-registration         — register for a free event (member)
"""

import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user

from clubsphere.decorators import auth_required, role_required
from clubsphere.extensions import db
from clubsphere.models.club import Club, Event
from clubsphere.services import grant_service

logger = logging.getLogger(__name__)

memberships_bp = Blueprint("memberships", __name__)


def _json_field(name):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    value = data.get(name)
    return value if isinstance(value, str) and value else None


@memberships_bp.route("/is-member/<club_id>")
@auth_required
def is_member(club_id):
    return jsonify({"isMember": grant_service.is_member(club_id, current_user.email)})


@memberships_bp.route("/is-registered/<event_id>")
@auth_required
def is_registered(event_id):
    return jsonify(
        {"isRegistered": grant_service.is_registered(event_id, current_user.email)}
    )


@memberships_bp.route("/free-membership", methods=["POST"])
@role_required("member")
def free_membership():
    """Join a club whose membership fee is zero.

    Joining twice is harmless: {success: true, created: false}.
    """
    club_id = _json_field("clubId")
    if not club_id:
        return jsonify({"success": False, "message": "clubId is required"}), 400

    club = db.session.get(Club, club_id)
    if club is None or club.status != "approved":
        return jsonify({"success": False, "message": "Club not found"}), 404
    if not club.is_free:
        return jsonify({"success": False, "message": "This club requires payment"}), 400

    created = grant_service.grant_free_membership(club, current_user)
    return jsonify({"success": True, "created": created})


@memberships_bp.route("/free-registration", methods=["POST"])
@role_required("member")
def free_registration():
    """Register for an event with no fee."""
    event_id = _json_field("eventId")
    if not event_id:
        return jsonify({"success": False, "message": "eventId is required"}), 400

    event = db.session.get(Event, event_id)
    if event is None:
        return jsonify({"success": False, "message": "Event not found"}), 404
    if not event.is_free:
        return jsonify({"success": False, "message": "This event requires payment"}), 400

    created = grant_service.grant_free_registration(event, current_user)
    return jsonify({"success": True, "created": created})
