"""Tests for the User model."""

from __future__ import annotations

import pytest
from lumir_auth.models.user import User, UserRole
from sqlalchemy.exc import IntegrityError


class TestUser:
    def test_defaults(self, session):
        u = User(email="a@example.com", name="A", password_hash="h")
        session.add(u)
        session.commit()

        assert u.role is UserRole.USER
        assert u.company is None
        assert u.created_at is not None

    def test_email_trimmed_but_case_preserved(self):
        u = User(email="  Alice@Example.com ", name="Alice", password_hash="h")
        assert u.email == "Alice@Example.com"

    @pytest.mark.parametrize("email", ["", "no-at-sign", "user@nodot"])
    def test_malformed_email_rejected(self, email):
        with pytest.raises(ValueError):
            User(email=email, name="X", password_hash="h")

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError):
            User(email="a@example.com", name="   ", password_hash="h")

    def test_email_unique(self, session):
        session.add(User(email="dup@example.com", name="One", password_hash="h"))
        session.commit()

        session.add(User(email="dup@example.com", name="Two", password_hash="h"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_emails_differing_in_case_are_distinct(self, session):
        session.add(User(email="case@example.com", name="One", password_hash="h"))
        session.add(User(email="CASE@example.com", name="Two", password_hash="h"))
        session.commit()
        assert session.query(User).count() == 2

    def test_repr_has_no_secrets(self):
        u = User(email="a@example.com", name="A", password_hash="secret-hash")
        assert "secret-hash" not in repr(u)
