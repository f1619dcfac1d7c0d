"""
Custom route decorators for access control.

- auth_required: a verified bearer identity that exists in the Role Directory.
- role_required(*roles): auth_required AND the caller's role is one of roles.

The role comes from the single Role Directory lookup Flask-Login performs
per request (see extensions.load_user_from_request); nothing here queries
the directory again.
"""

from functools import wraps

from flask import jsonify
from flask_login import current_user, login_required

ROLE_MESSAGES = {
    ("admin",): "Admin only actions!",
    ("manager",): "Manager only actions!",
    ("member",): "Member only actions!",
}


def auth_required(f):
    """Require a verified identity (401 JSON otherwise)."""
    return login_required(f)


def role_required(*roles):
    """Require a verified identity whose role is in `roles`."""
    roles = tuple(roles)
    message = ROLE_MESSAGES.get(roles, "forbidden access")

    def decorator(f):
        @wraps(f)
        @login_required
        def decorated(*args, **kwargs):
            if not current_user.has_role(*roles):
                return jsonify({"message": message, "role": current_user.role}), 403
            return f(*args, **kwargs)

        return decorated

    return decorator
