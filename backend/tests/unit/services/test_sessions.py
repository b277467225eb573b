"""Unit tests for the refresh registry and the access-token blacklist."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time
from lumir_auth.services._shared.ports import InMemorySessionStore
from lumir_auth.services.auth import AccessTokenBlacklist, RefreshTokenRegistry
from lumir_auth.services.auth.sessions import blacklist_key, refresh_key


@pytest.fixture()
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture()
def registry(store) -> RefreshTokenRegistry:
    return RefreshTokenRegistry(store, ttl=timedelta(days=7))


@pytest.fixture()
def blacklist(store) -> AccessTokenBlacklist:
    return AccessTokenBlacklist(store)


class TestRefreshTokenRegistry:
    def test_register_claims_empty_slot_once(self, registry):
        assert registry.register("a@example.com", "rt-1") is True
        assert registry.register("a@example.com", "rt-2") is False
        assert registry.current("a@example.com") == "rt-1"

    def test_replace_overwrites(self, registry):
        registry.register("a@example.com", "rt-1")
        registry.replace("a@example.com", "rt-2")
        assert registry.current("a@example.com") == "rt-2"

    def test_revoke_frees_slot(self, registry):
        registry.register("a@example.com", "rt-1")
        registry.revoke("a@example.com")
        assert registry.current("a@example.com") is None
        assert registry.register("a@example.com", "rt-2") is True

    def test_entry_expires_with_refresh_lifetime(self, registry, store):
        with freeze_time("2026-03-01 12:00:00") as frozen:
            registry.register("a@example.com", "rt-1")
            assert store.ttl(refresh_key("a@example.com")) == 7 * 24 * 3600
            frozen.tick(timedelta(days=7))
            assert registry.current("a@example.com") is None

    def test_move_rekeys_live_slot(self, registry):
        registry.register("old@example.com", "rt-1")
        registry.move("old@example.com", "new@example.com")
        assert registry.current("old@example.com") is None
        assert registry.current("new@example.com") == "rt-1"

    def test_move_without_live_slot_is_a_noop(self, registry):
        registry.move("old@example.com", "new@example.com")
        assert registry.current("new@example.com") is None


class TestAccessTokenBlacklist:
    def test_contains_after_add(self, blacklist):
        blacklist.add("tok", datetime.now(UTC) + timedelta(minutes=5))
        assert blacklist.contains("tok") is True
        assert blacklist.contains("other") is False

    def test_entry_lives_for_remaining_lifetime(self, blacklist, store):
        with freeze_time("2026-03-01 12:00:00") as frozen:
            blacklist.add("tok", datetime.now(UTC) + timedelta(minutes=5))
            assert store.ttl(blacklist_key("tok")) == 300
            frozen.tick(timedelta(minutes=5))
            assert blacklist.contains("tok") is False

    def test_already_expired_token_is_kept_one_second(self, blacklist, store):
        with freeze_time("2026-03-01 12:00:00"):
            blacklist.add("tok", datetime.now(UTC) - timedelta(minutes=5))
            assert store.ttl(blacklist_key("tok")) == 1


def test_registry_and_blacklist_share_one_store_without_collisions(registry, blacklist):
    # A token string equal to an email must not alias across the two views
    registry.register("same", "rt-1")
    assert blacklist.contains("same") is False
    blacklist.add("same", datetime.now(UTC) + timedelta(minutes=1))
    assert registry.current("same") == "rt-1"


class TestInMemorySessionStore:
    def test_writes_drop_expired_entries_that_are_never_read(self, blacklist, store):
        with freeze_time("2026-03-01 12:00:00") as frozen:
            for n in range(3):
                blacklist.add(f"tok-{n}", datetime.now(UTC) + timedelta(minutes=5))
            assert store.size() == 3

            frozen.tick(timedelta(minutes=6))
            blacklist.add("fresh", datetime.now(UTC) + timedelta(minutes=5))

            assert store.size() == 1
            assert blacklist.contains("fresh") is True

    def test_add_succeeds_once_previous_entry_expired(self, store):
        with freeze_time("2026-03-01 12:00:00") as frozen:
            assert store.add("k", "v1", 60) is True
            assert store.add("k", "v2", 60) is False
            frozen.tick(timedelta(seconds=61))
            assert store.add("k", "v2", 60) is True
            assert store.get("k") == "v2"
