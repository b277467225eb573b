"""Unit tests for the bcrypt password hasher."""

from __future__ import annotations

import pytest
from lumir_auth.infra.security.bcrypt_password_hasher import BcryptPasswordHasher


@pytest.fixture()
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


def test_hash_is_salted(hasher):
    first, second = hasher.hash("Correct-Horse-42"), hasher.hash("Correct-Horse-42")
    assert first != second
    assert hasher.verify("Correct-Horse-42", first)
    assert hasher.verify("Correct-Horse-42", second)


def test_verify_rejects_wrong_password(hasher):
    assert hasher.verify("wrong", hasher.hash("Correct-Horse-42")) is False


def test_work_factor_is_embedded(hasher):
    assert hasher.hash("x").startswith("$2b$04$")


def test_malformed_hash_raises_value_error(hasher):
    with pytest.raises(ValueError):
        hasher.verify("x", "not-a-bcrypt-hash")
