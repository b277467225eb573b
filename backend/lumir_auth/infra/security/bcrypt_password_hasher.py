from __future__ import annotations

import bcrypt

from lumir_auth.services._shared.ports.password_hasher import PasswordHasher


class BcryptPasswordHasher(PasswordHasher):
    """
    bcrypt adapter for the :class:`PasswordHasher` port.

    The work factor is embedded in every hash, so verification always uses
    the cost the hash was created with. bcrypt releases the GIL while
    hashing, so threaded workers keep serving other requests meanwhile.

    :param rounds: Work factor for new hashes (``BCRYPT_ROUNDS``).
    """

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        # A malformed stored hash raises ValueError; callers treat it as a fault
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
