"""
Deferred extension instances.

Created here, bound to the app in create_app() via init_app().
"""

from flask import jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],  # No global limit — we apply per-route
    storage_uri="memory://",
)

# Bearer-token API: no cookie sessions to protect
login_manager.session_protection = None


@login_manager.request_loader
def load_user_from_request(request):
    """Resolve the verified bearer identity to a Role Directory entry.

    Runs at most once per request (Flask-Login caches the result on g).
    Imports lazily to avoid circular deps.
    """
    from clubsphere.models.user import User
    from clubsphere.services.auth_service import identity_from_request

    email = identity_from_request()
    if not email:
        return None
    return User.query.filter_by(email=email).first()


@login_manager.unauthorized_handler
def unauthorized():
    """JSON 401 instead of a redirect to a login page."""
    return jsonify({"message": "unauthorized access"}), 401
