import os
import logging

import click
from flask import Flask, jsonify

from clubsphere.config import config_by_name
from clubsphere.extensions import db, migrate, login_manager, limiter


def create_app(config_name=None):
    """Application factory."""

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # --- Validate required env vars (skip in testing) ---
    if config_name != "testing":
        try:
            config_by_name[config_name].validate()
        except RuntimeError as e:
            app.logger.warning(f"Config validation: {e}")

    # --- Init extensions ---
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    from clubsphere.services.checkout_service import init_checkout_provider
    init_checkout_provider(app)

    # --- Import models so Alembic can discover them ---
    with app.app_context():
        from clubsphere import models  # noqa: F401

    # --- Demo mode: block writes from demo identities ---
    from clubsphere.middleware.demo_mode import init_demo_mode
    init_demo_mode(app)

    # --- Register blueprints ---
    from clubsphere.blueprints.auth import auth_bp
    from clubsphere.blueprints.payments import payments_bp
    from clubsphere.blueprints.memberships import memberships_bp
    from clubsphere.blueprints.webhooks import webhooks_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(memberships_bp)
    app.register_blueprint(webhooks_bp)

    # --- Root route ---
    @app.route("/")
    def index():
        return jsonify({"message": "ClubSphere is clubbing...."})

    # --- Error handlers ---
    # JSON only; never leak internal error detail.
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"message": "not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"message": "method not allowed"}), 405

    @app.errorhandler(429)
    def rate_limited(e):
        return jsonify({"message": "too many requests"}), 429

    @app.errorhandler(500)
    def server_error(e):
        return jsonify({"message": "internal server error"}), 500

    # --- CLI commands ---
    register_cli(app)

    # --- Security + CORS headers ---
    @app.after_request
    def add_response_headers(response):
        """Add security and CORS headers to every response."""
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Strict Transport Security (only in production)
        if not app.debug:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        # The SPA on CLIENT_DOMAIN calls us cross-origin with a bearer token
        response.headers["Access-Control-Allow-Origin"] = app.config["CLIENT_DOMAIN"]
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
        response.headers["Vary"] = "Origin"
        return response

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("seed-demo")
    @click.option("--password", default="demo12345", help="Password for demo accounts")
    def seed_demo(password):
        """Create one demo account per role plus a sample club and event.

        Demo accounts can log in and read everything but every write they
        attempt is blocked (see DEMO_EMAILS).

        Usage:
            flask seed-demo
            flask seed-demo --password s3cret123
        """
        from decimal import Decimal

        from werkzeug.security import generate_password_hash

        from clubsphere.models.club import Club, Event
        from clubsphere.models.user import User

        demo_accounts = [
            ("admin@sphere.com", "Demo Admin", "admin"),
            ("manager@sphere.com", "Demo Manager", "manager"),
            ("member@sphere.com", "Demo Member", "member"),
        ]
        for email, name, role in demo_accounts:
            if User.query.filter_by(email=email).first():
                click.echo(f"Demo user already exists: {email}")
                continue
            db.session.add(User(
                email=email,
                password_hash=generate_password_hash(password),
                name=name,
                role=role,
            ))
            click.echo(f"Created {role}: {email}")

        club = Club.query.filter_by(club_name="Sphere Chess Club").first()
        if club is None:
            club = Club(
                club_name="Sphere Chess Club",
                description="Weekly rapid and blitz nights.",
                category="Games",
                membership_fee=Decimal("25.00"),
                manager_email="manager@sphere.com",
                status="approved",
                event_count=1,
            )
            db.session.add(club)
            db.session.flush()
            db.session.add(Event(
                club_id=club.id,
                event_title="Spring Rapid Open",
                description="Seven rounds, 15+10.",
                is_paid=True,
                event_fee=Decimal("10.00"),
                manager_email="manager@sphere.com",
            ))
            click.echo(f"Created club: {club.club_name} (id: {club.id})")

        db.session.commit()

        click.echo("")
        click.echo("=" * 60)
        click.echo("Demo data ready.")
        click.echo(f"  Password for all demo accounts: {password}")
        click.echo("=" * 60)

    @app.cli.command("set-role")
    @click.option("--email", required=True, help="User email")
    @click.option("--role", required=True, type=click.Choice(["admin", "manager", "member"]))
    def set_role(email, role):
        """Change a user's role in the Role Directory.

        Usage:
            flask set-role --email alice@example.com --role manager
        """
        from clubsphere.services.auth_service import set_role as _set_role

        user = _set_role(email, role)
        if user is None:
            click.echo(f"No user with email {email}")
            return
        click.echo(f"{user.email} is now {user.role}")
