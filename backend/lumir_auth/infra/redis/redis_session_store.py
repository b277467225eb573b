from __future__ import annotations

from typing import cast

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from lumir_auth.services._shared.errors import InternalServiceError
from lumir_auth.services._shared.ports.session_store import SessionStore


class RedisSessionStore(SessionStore):
    """
    Session store backed by Redis string keys with native expiry.

    ``add`` maps to ``SET NX EX``, so registering a refresh token is a single
    atomic round trip. Every Redis failure surfaces as
    :class:`InternalServiceError` and is not retried.
    """

    def __init__(self, r: redis.Redis):
        self.r = r

    @staticmethod
    def _decode(raw: bytes | str | None) -> str | None:
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else raw

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self.r.set(key, value, ex=max(1, int(ttl_seconds)))
        except RedisError as exc:
            raise InternalServiceError(
                f"Session store write failed: {exc}", at="RedisSessionStore.set"
            ) from exc

    def add(self, key: str, value: str, ttl_seconds: int) -> bool:
        try:
            return bool(self.r.set(key, value, ex=max(1, int(ttl_seconds)), nx=True))
        except RedisError as exc:
            raise InternalServiceError(
                f"Session store write failed: {exc}", at="RedisSessionStore.add"
            ) from exc

    def get(self, key: str) -> str | None:
        try:
            return self._decode(cast(bytes | str | None, self.r.get(key)))
        except RedisError as exc:
            raise InternalServiceError(
                f"Session store read failed: {exc}", at="RedisSessionStore.get"
            ) from exc

    def delete(self, key: str) -> None:
        try:
            self.r.delete(key)
        except RedisError as exc:
            raise InternalServiceError(
                f"Session store delete failed: {exc}", at="RedisSessionStore.delete"
            ) from exc

    def ping(self) -> bool:
        try:
            return bool(self.r.ping())
        except RedisError:
            return False
