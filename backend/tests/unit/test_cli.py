"""Unit tests for the ``flask users`` command group."""

from __future__ import annotations

from lumir_auth.core.extensions import db
from lumir_auth.models.user import User, UserRole


def test_create_admin(app):
    runner = app.test_cli_runner()

    result = runner.invoke(
        args=[
            "users",
            "create-admin",
            "--email",
            "root@example.com",
            "--name",
            "Root",
            "--password",
            "Correct-Horse-42",
        ]
    )

    assert result.exit_code == 0, result.output
    assert "Created admin root@example.com" in result.output
    with app.app_context():
        user = db.session.query(User).filter_by(email="root@example.com").one()
        assert user.role is UserRole.ADMIN


def test_create_admin_rejects_weak_password(app):
    runner = app.test_cli_runner()

    result = runner.invoke(
        args=["users", "create-admin", "--email", "a@example.com", "--name", "A", "--password", "x"]
    )

    assert result.exit_code != 0
    assert "strength policy" in result.output
