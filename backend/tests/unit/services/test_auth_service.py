# tests/unit/services/test_auth_service.py
from __future__ import annotations

from datetime import timedelta

import pytest
from freezegun import freeze_time
from lumir_auth.infra.security.bcrypt_password_hasher import BcryptPasswordHasher
from lumir_auth.models.user import User, UserRole
from lumir_auth.services._shared.errors import (
    AuthenticationError,
    PasswordConfirmationMismatchError,
    PasswordMismatchError,
    RefreshTokenAlreadyExistsError,
    UserAlreadyExistsError,
    UserNotFoundError,
    WeakPasswordError,
)
from lumir_auth.services._shared.ports import InMemorySessionStore, StubTokenProvider
from lumir_auth.services.auth import SessionTokensIn, SignInIn, SignUpIn, TokenPairOut
from lumir_auth.services.auth.service import AuthService
from lumir_auth.services.auth.sessions import blacklist_key, refresh_key
from tests.factories.user import DEFAULT_PASSWORD, UserFactory


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture()
def service(store) -> AuthService:
    """
    Build an AuthService wired to in-memory doubles.

    .. note::
       Passwords are real bcrypt hashes (cheap work factor) so factory users
       can sign in.
    """
    return AuthService(
        token_provider=StubTokenProvider(),
        session_store=store,
        password_hasher=BcryptPasswordHasher(rounds=4),
    )


def _signup_dto(**overrides) -> SignUpIn:
    values = {
        "name": "John Doe",
        "email": "john@doe.com",
        "password": DEFAULT_PASSWORD,
        "password_confirmation": DEFAULT_PASSWORD,
    }
    values.update(overrides)
    return SignUpIn(**values)


def _tokens(pair: TokenPairOut) -> SessionTokensIn:
    return SessionTokensIn(access_token=pair.access_token, refresh_token=pair.refresh_token)


# ------------------------------- Sign up ---------------------------------- #
def test_sign_up_persists_user_with_hashed_password(service, session):
    out = service.sign_up(_signup_dto(company="Acme"))

    assert out.email == "john@doe.com"
    assert out.name == "John Doe"
    assert out.company == "Acme"
    assert out.role == "USER"

    stored = session.query(User).filter_by(email="john@doe.com").one()
    assert str(stored.id) == out.id
    assert stored.password_hash != DEFAULT_PASSWORD
    assert service.hasher.verify(DEFAULT_PASSWORD, stored.password_hash)


def test_sign_up_accepts_explicit_role(service, session):
    out = service.sign_up(_signup_dto(role=UserRole.ADMIN))
    assert out.role == "ADMIN"


def test_sign_up_rejects_duplicate_email(service, session):
    UserFactory(email="john@doe.com")

    with pytest.raises(UserAlreadyExistsError):
        service.sign_up(_signup_dto())

    assert session.query(User).filter_by(email="john@doe.com").count() == 1


def test_sign_up_rejects_confirmation_mismatch(service, session):
    with pytest.raises(PasswordConfirmationMismatchError):
        service.sign_up(_signup_dto(password_confirmation="Something-Else-99"))
    assert session.query(User).count() == 0


def test_sign_up_rejects_weak_password(service, session):
    with pytest.raises(WeakPasswordError) as excinfo:
        service.sign_up(_signup_dto(password="password!", password_confirmation="password!"))

    assert excinfo.value.violations
    assert session.query(User).count() == 0


def test_sign_up_rejects_password_over_byte_limit(service, session):
    long_password = "Aa1" + "x" * 90
    with pytest.raises(WeakPasswordError):
        service.sign_up(_signup_dto(password=long_password, password_confirmation=long_password))
    assert session.query(User).count() == 0


# ------------------------------- Sign in ---------------------------------- #
def test_sign_in_after_sign_up_issues_pair_and_registers_refresh(service, store, session):
    service.sign_up(_signup_dto())

    pair = service.sign_in(SignInIn(email="john@doe.com", password=DEFAULT_PASSWORD))

    assert isinstance(pair, TokenPairOut)
    assert pair.access_token.startswith("access.")
    assert pair.refresh_token.startswith("refresh.")
    assert store.get(refresh_key("john@doe.com")) == pair.refresh_token


def test_sign_in_access_token_carries_identity(service, session):
    user = UserFactory()

    pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))

    claims = service.decode_access_token(pair.access_token)
    assert claims["sub"] == str(user.id)
    assert claims["email"] == user.email


def test_sign_in_unknown_email(service, session):
    with pytest.raises(UserNotFoundError):
        service.sign_in(SignInIn(email="missing@example.com", password=DEFAULT_PASSWORD))


def test_sign_in_wrong_password(service, store, session):
    user = UserFactory()

    with pytest.raises(PasswordMismatchError):
        service.sign_in(SignInIn(email=user.email, password="Wrong-Password-1"))

    assert store.get(refresh_key(user.email)) is None


def test_second_sign_in_is_refused_while_refresh_is_live(service, store, session):
    user = UserFactory()
    first = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))

    with pytest.raises(RefreshTokenAlreadyExistsError):
        service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))

    # The original session is untouched
    assert store.get(refresh_key(user.email)) == first.refresh_token


def test_sign_in_allowed_again_after_refresh_expires(service, session):
    user = UserFactory()
    with freeze_time("2026-01-01 00:00:00") as frozen:
        service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
        frozen.tick(timedelta(days=7, seconds=1))
        pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
    assert pair.refresh_token


# ------------------------------- Sign out --------------------------------- #
def test_sign_out_blacklists_access_and_drops_refresh(service, store, session):
    user = UserFactory()
    pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))

    service.sign_out(_tokens(pair))

    assert service.is_blacklisted(pair.access_token) is True
    assert store.get(refresh_key(user.email)) is None


def test_sign_out_blacklist_entry_lives_until_token_expiry(service, store, session):
    user = UserFactory()
    with freeze_time("2026-01-01 00:00:00") as frozen:
        pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
        frozen.tick(timedelta(hours=1))
        service.sign_out(_tokens(pair))

        remaining = store.ttl(blacklist_key(pair.access_token))
        assert remaining == int(timedelta(hours=23).total_seconds())

        frozen.tick(timedelta(hours=23, seconds=1))
        assert service.is_blacklisted(pair.access_token) is False


def test_sign_out_twice_is_unauthorized(service, session):
    user = UserFactory()
    pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
    service.sign_out(_tokens(pair))

    with pytest.raises(AuthenticationError):
        service.sign_out(_tokens(pair))


@pytest.mark.parametrize(
    "access, refresh",
    [(None, "refresh.x.1"), ("access.x.1", None), ("", "")],
)
def test_sign_out_requires_both_tokens(service, access, refresh):
    with pytest.raises(AuthenticationError):
        service.sign_out(SessionTokensIn(access_token=access, refresh_token=refresh))


def test_sign_in_allowed_after_sign_out(service, session):
    user = UserFactory()
    pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
    service.sign_out(_tokens(pair))

    again = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
    assert again.access_token != pair.access_token


# ---------------------------- Slide session ------------------------------- #
def test_slide_session_rotates_pair(service, store, session):
    user = UserFactory()
    pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))

    slid = service.slide_session(_tokens(pair))

    assert slid.access_token != pair.access_token
    assert slid.refresh_token != pair.refresh_token
    assert service.is_blacklisted(pair.access_token) is True
    assert service.is_blacklisted(slid.access_token) is False
    assert store.get(refresh_key(user.email)) == slid.refresh_token


def test_slide_session_with_old_pair_is_unauthorized(service, session):
    user = UserFactory()
    pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
    service.slide_session(_tokens(pair))

    with pytest.raises(AuthenticationError):
        service.slide_session(_tokens(pair))


def test_slide_session_rejects_unregistered_refresh(service, session):
    user = UserFactory()
    pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
    foreign_refresh = service.tokens.issue_refresh()

    with pytest.raises(AuthenticationError):
        service.slide_session(
            SessionTokensIn(access_token=pair.access_token, refresh_token=foreign_refresh)
        )
    assert service.is_blacklisted(pair.access_token) is False


def test_slide_session_rejects_access_token_in_refresh_slot(service, session):
    user = UserFactory()
    pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))

    with pytest.raises(AuthenticationError):
        service.slide_session(
            SessionTokensIn(access_token=pair.access_token, refresh_token=pair.access_token)
        )


def test_slide_session_renews_expired_access_token(service, store, session):
    """The refresh token keeps the session alive past the access token lifetime."""
    user = UserFactory()
    with freeze_time("2026-01-01 00:00:00") as frozen:
        pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
        frozen.tick(timedelta(hours=25))

        slid = service.slide_session(_tokens(pair))

        assert service.decode_access_token(slid.access_token)["sub"] == str(user.id)
        assert store.get(refresh_key(user.email)) == slid.refresh_token


def test_slide_session_with_expired_access_needs_registered_refresh(service, session):
    user = UserFactory()
    with freeze_time("2026-01-01 00:00:00") as frozen:
        pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
        frozen.tick(timedelta(hours=25))
        foreign = service.tokens.issue_refresh()

        with pytest.raises(AuthenticationError):
            service.slide_session(
                SessionTokensIn(access_token=pair.access_token, refresh_token=foreign)
            )


def test_sign_out_with_expired_access_token_frees_refresh_slot(service, store, session):
    user = UserFactory()
    with freeze_time("2026-01-01 00:00:00") as frozen:
        pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
        frozen.tick(timedelta(hours=25))

        service.sign_out(_tokens(pair))

        assert store.get(refresh_key(user.email)) is None
        again = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
        assert again.refresh_token != pair.refresh_token


def test_sign_out_with_expired_access_token_needs_registered_refresh(
    service, store, session
):
    user = UserFactory()
    with freeze_time("2026-01-01 00:00:00") as frozen:
        pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
        frozen.tick(timedelta(hours=25))
        foreign = service.tokens.issue_refresh()

        with pytest.raises(AuthenticationError):
            service.sign_out(SessionTokensIn(access_token=pair.access_token, refresh_token=foreign))

        assert store.get(refresh_key(user.email)) == pair.refresh_token


# ---------------------------- Delete account ------------------------------ #
def test_delete_account_signs_out_and_removes_user(service, store, session):
    user = UserFactory()
    user_id, email = user.id, user.email
    pair = service.sign_in(SignInIn(email=email, password=DEFAULT_PASSWORD))

    out = service.delete_account(_tokens(pair))

    assert out.id == str(user_id)
    assert out.email == email
    assert session.get(User, user_id) is None
    assert service.is_blacklisted(pair.access_token) is True
    assert store.get(refresh_key(email)) is None


def test_delete_account_rejects_expired_access_token(service, session):
    user = UserFactory()
    with freeze_time("2026-01-01 00:00:00") as frozen:
        pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
        frozen.tick(timedelta(hours=25))

        with pytest.raises(AuthenticationError, match="expired"):
            service.delete_account(_tokens(pair))
    assert session.query(User).count() == 1


def test_delete_account_with_revoked_token_is_unauthorized(service, session):
    user = UserFactory()
    pair = service.sign_in(SignInIn(email=user.email, password=DEFAULT_PASSWORD))
    service.sign_out(_tokens(pair))

    with pytest.raises(AuthenticationError):
        service.delete_account(_tokens(pair))
    assert session.query(User).count() == 1


# ------------------------------- Queries ---------------------------------- #
def test_is_blacklisted_false_for_unknown_token(service):
    assert service.is_blacklisted("never-issued") is False


def test_decode_access_token_rejects_refresh_token(service, session):
    refresh = service.tokens.issue_refresh()
    with pytest.raises(AuthenticationError):
        service.decode_access_token(refresh)
