"""Auth service — session tokens and the request's verified identity.

Tokens are HS256 JWTs signed with JWT_SECRET. A request's identity is the
`email` claim of a valid bearer token and nothing else: any missing,
malformed, expired or mis-signed credential yields no identity.
"""

import logging
import time

import jwt
from flask import current_app, g, request
from jwt import InvalidTokenError
from werkzeug.security import check_password_hash, generate_password_hash

from clubsphere.extensions import db
from clubsphere.models.user import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

_UNSET = object()


def issue_token(user):
    """Sign a session token for a Role Directory user."""
    now = int(time.time())
    payload = {
        "sub": user.id,
        "email": user.email,
        "iat": now,
        "exp": now + current_app.config["JWT_EXPIRES_SECONDS"],
    }
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=ALGORITHM)


def decode_token(token):
    """Decode and validate a session token.

    Raises jwt.InvalidTokenError subclasses on failure.
    """
    payload = jwt.decode(
        token,
        current_app.config["JWT_SECRET"],
        algorithms=[ALGORITHM],
        options={"require": ["exp", "iat", "email"]},
    )
    if not payload.get("email"):
        raise InvalidTokenError("missing_claim:email")
    return payload


def _bearer_token():
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def identity_from_request():
    """Verified email for the current request, or None. Cached on g."""
    cached = g.get("identity_email", _UNSET)
    if cached is not _UNSET:
        return cached

    email = None
    token = _bearer_token()
    if token:
        try:
            email = decode_token(token)["email"].lower()
        except InvalidTokenError as e:
            logger.info(f"Rejected bearer token: {e}")
    g.identity_email = email
    return email


# ──────────────────────────────────────────────
# Role Directory writes
# ──────────────────────────────────────────────

def register_user(email, password, name=None, photo_url=None):
    """Create a member. Returns the new User, or None if the email exists."""
    email = email.lower().strip()
    if User.query.filter_by(email=email).first():
        return None
    user = User(
        email=email,
        password_hash=generate_password_hash(password),
        name=name,
        photo_url=photo_url,
        role="member",
    )
    db.session.add(user)
    db.session.commit()
    logger.info(f"Registered member {email}")
    return user


def authenticate(email, password):
    """Return the User for valid credentials, else None."""
    user = User.query.filter_by(email=(email or "").lower().strip()).first()
    if user is None or not user.is_active:
        return None
    if not check_password_hash(user.password_hash, password or ""):
        return None
    return user


def set_role(email, role):
    """Change a user's role. Returns the User, or None if unknown."""
    if role not in User.ROLES:
        raise ValueError(f"role must be one of {', '.join(User.ROLES)}")
    user = User.query.filter_by(email=email.lower().strip()).first()
    if user is None:
        return None
    user.role = role
    db.session.commit()
    logger.info(f"Role of {user.email} set to {role}")
    return user
