"""Auth blueprint — /auth/*

Registration into the Role Directory, session token issuance, role lookup.
"""

from flask import Blueprint, jsonify, request
from flask_login import current_user

from clubsphere.decorators import auth_required
from clubsphere.extensions import limiter
from clubsphere.services import auth_service

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ──────────────────────────────────────────────
# POST /auth/register
# ──────────────────────────────────────────────

@auth_bp.route("/register", methods=["POST"])
@limiter.limit("10 per minute")
def register():
    """Create a member account. New users always start as `member`."""
    data = _body()
    email = (data.get("email") or "").lower().strip()
    password = data.get("password") or ""
    name = (data.get("name") or "").strip()

    errors = []
    if not email:
        errors.append("Email is required.")
    if not password:
        errors.append("Password is required.")
    elif len(password) < 8:
        errors.append("Password must be at least 8 characters.")
    if errors:
        return jsonify({"message": " ".join(errors)}), 400

    user = auth_service.register_user(
        email, password, name=name or None, photo_url=data.get("photoUrl")
    )
    if user is None:
        return jsonify({"message": "User Already Exists"}), 409

    return jsonify({"id": user.id, "email": user.email, "role": user.role}), 201


# ──────────────────────────────────────────────
# POST /auth/token
# ──────────────────────────────────────────────

@auth_bp.route("/token", methods=["POST"])
@limiter.limit("15 per minute")
def token():
    """Exchange email + password for a bearer token."""
    data = _body()
    user = auth_service.authenticate(data.get("email"), data.get("password"))
    if user is None:
        return jsonify({"message": "Invalid email or password."}), 401
    return jsonify({"token": auth_service.issue_token(user)})


# ──────────────────────────────────────────────
# GET /auth/role
# ──────────────────────────────────────────────

@auth_bp.route("/role")
@auth_required
def role():
    return jsonify({"role": current_user.role})
