from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for slow, salted password hashing."""

    def hash(self, plain: str) -> str: ...

    def verify(self, plain: str, hashed: str) -> bool: ...


class StubPasswordHasher(PasswordHasher):
    """Reversible marker hasher for unit tests. Never use outside tests."""

    PREFIX = "stub$"

    def hash(self, plain: str) -> str:
        return f"{self.PREFIX}{plain}"

    def verify(self, plain: str, hashed: str) -> bool:
        if not hashed.startswith(self.PREFIX):
            raise ValueError("Invalid hash format")
        return hashed == self.hash(plain)
