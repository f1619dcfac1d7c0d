"""Tests for the flask CLI commands (seed-demo, set-role)."""

from clubsphere.models.club import Club, Event
from clubsphere.models.user import User


def test_seed_demo_is_repeatable(app):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed-demo", "--password", "s3cret123"])
    second = runner.invoke(args=["seed-demo"])

    assert first.exit_code == 0
    assert "Created member: member@sphere.com" in first.output
    assert "Demo user already exists: member@sphere.com" in second.output
    with app.app_context():
        assert User.query.filter(User.email.like("%@sphere.com")).count() == 3
        assert Club.query.filter_by(club_name="Sphere Chess Club").count() == 1
        assert Event.query.count() == 1


def test_set_role(app, seed_data):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["set-role", "--email", "b@x.com", "--role", "manager"])

    assert result.exit_code == 0
    assert "b@x.com is now manager" in result.output
    with app.app_context():
        assert User.query.filter_by(email="b@x.com").one().role == "manager"


def test_set_role_unknown_user(app):
    result = app.test_cli_runner().invoke(
        args=["set-role", "--email", "nobody@x.com", "--role", "admin"]
    )
    assert "No user with email nobody@x.com" in result.output
