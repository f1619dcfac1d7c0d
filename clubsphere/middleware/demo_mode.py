"""Demo mode middleware — read-only access for demo identities.

Runs before every request. If the verified bearer identity is one of
DEMO_EMAILS and the request is a write, responds immediately with a
soft failure the client renders as a notice:

    {"success": false, "isDemo": true, "message": "..."}

Unauthenticated requests pass through untouched; the route's own
auth/role decorators reject them.
"""

import logging

from flask import current_app, jsonify, request

from clubsphere.services.auth_service import identity_from_request

logger = logging.getLogger(__name__)

READ_METHODS = ("GET", "HEAD", "OPTIONS")

# Token issuance must stay open to demo accounts; webhooks carry no bearer.
EXEMPT_PREFIXES = ("/auth/", "/stripe/")

DEMO_MESSAGE = "Demo Mode: You can view the UI but cannot modify data."


def block_demo_writes():
    """Before-request hook. Returns a response to short-circuit, else None."""
    if request.method in READ_METHODS:
        return None
    if request.path.startswith(EXEMPT_PREFIXES):
        return None

    email = identity_from_request()
    if email and email in current_app.config["DEMO_EMAILS"]:
        logger.info(f"Blocked demo write {request.method} {request.path} by {email}")
        return jsonify({"success": False, "isDemo": True, "message": DEMO_MESSAGE})
    return None


def init_demo_mode(app):
    """Register the demo guard as a before_request hook."""
    app.before_request(block_demo_writes)
