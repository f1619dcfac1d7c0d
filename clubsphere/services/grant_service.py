"""Grant service — memberships, event registrations and their counters.

Grants are inserted at most once per transaction id. Counter increments
follow a *newly inserted* grant only, and a failed increment never undoes
the grant: the counters are display aggregates and may drift.
"""

import logging

from clubsphere.errors import DependencyUnavailable
from clubsphere.models.club import Club, Event
from clubsphere.models.grant import MembershipGrant, RegistrationGrant
from clubsphere.services.store import increment, insert_if_absent, store_errors

logger = logging.getLogger(__name__)


def grant_membership_if_absent(transaction_id, club_id, buyer_email,
                               buyer_name=None, owner_email=None,
                               club_name=None):
    """Create an active membership unless one exists for transaction_id.

    Returns True if inserted.
    """
    return insert_if_absent(
        MembershipGrant,
        transaction_id,
        club_id=club_id,
        club_name=club_name,
        buyer_email=buyer_email,
        buyer_name=buyer_name,
        owner_email=owner_email,
        status="active",
    )


def grant_registration_if_absent(transaction_id, event_id, club_id,
                                 buyer_email, buyer_name=None,
                                 owner_email=None, event_title=None,
                                 club_name=None):
    """Create a registration unless one exists for transaction_id.

    Returns True if inserted.
    """
    return insert_if_absent(
        RegistrationGrant,
        transaction_id,
        event_id=event_id,
        event_title=event_title,
        club_id=club_id,
        club_name=club_name,
        buyer_email=buyer_email,
        buyer_name=buyer_name,
        owner_email=owner_email,
        status="registered",
    )


# ──────────────────────────────────────────────
# Counters
# ──────────────────────────────────────────────

def _increment_quietly(model, row_id, column):
    try:
        updated = increment(model, row_id, column)
    except DependencyUnavailable as e:
        logger.error(
            f"Counter {model.__tablename__}.{column.key} +1 failed for {row_id}: {e.message}",
            exc_info=True,
        )
        return False
    if not updated:
        logger.warning(f"Counter {model.__tablename__}.{column.key}: no row {row_id}")
        return False
    return True


def increment_club_members(club_id):
    """club.member_count += 1. Failures are logged, never raised."""
    return _increment_quietly(Club, club_id, Club.member_count)


def increment_event_registrations(event_id):
    """event.registration_count += 1. Failures are logged, never raised."""
    return _increment_quietly(Event, event_id, Event.registration_count)


# ──────────────────────────────────────────────
# Free grants (no checkout)
# ──────────────────────────────────────────────

def free_transaction_id(target_id, email):
    """Deterministic key: joining the same free target twice is a no-op."""
    return f"free:{target_id}:{email.lower()}"


def grant_free_membership(club, user):
    """Grant membership in a zero-fee club. Returns True if newly granted."""
    inserted = grant_membership_if_absent(
        transaction_id=free_transaction_id(club.id, user.email),
        club_id=club.id,
        buyer_email=user.email,
        buyer_name=user.name,
        owner_email=club.manager_email,
        club_name=club.club_name,
    )
    if inserted:
        increment_club_members(club.id)
    return inserted


def grant_free_registration(event, user):
    """Register for a free event. Returns True if newly registered."""
    club = event.club
    inserted = grant_registration_if_absent(
        transaction_id=free_transaction_id(event.id, user.email),
        event_id=event.id,
        club_id=event.club_id,
        buyer_email=user.email,
        buyer_name=user.name,
        owner_email=event.manager_email,
        event_title=event.event_title,
        club_name=club.club_name if club else None,
    )
    if inserted:
        increment_event_registrations(event.id)
    return inserted


# ──────────────────────────────────────────────
# Lookups
# ──────────────────────────────────────────────

def is_member(club_id, email):
    with store_errors("membership lookup"):
        return MembershipGrant.query.filter_by(
            club_id=club_id, buyer_email=email
        ).first() is not None


def is_registered(event_id, email):
    with store_errors("registration lookup"):
        return RegistrationGrant.query.filter_by(
            event_id=event_id, buyer_email=email
        ).first() is not None
