"""User model — the Role Directory.

Maps a verified identity (email) to exactly one role. Flask-Login
integration via UserMixin; users are loaded from the bearer token, never
from a cookie session.
"""

import uuid

from flask_login import UserMixin

from clubsphere.extensions import db


class User(UserMixin, db.Model):
    __tablename__ = "users"

    ROLES = ["admin", "manager", "member"]

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255))
    photo_url = db.Column(db.String(1024))
    role = db.Column(
        db.String(20), nullable=False, default="member"
    )  # admin | manager | member
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def has_role(self, *roles):
        return self.role in roles

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
