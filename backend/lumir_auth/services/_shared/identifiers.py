from __future__ import annotations

from uuid import UUID

from lumir_auth.services._shared.errors import InvalidUserIdError


def parse_user_id(raw: object, *, at: str) -> UUID:
    """
    Parse an opaque user id.

    :param raw: Candidate id (string form of a UUID, or a UUID).
    :param at: Location tag used when the id is malformed.
    :returns: Parsed UUID.
    :raises InvalidUserIdError: If ``raw`` is not a well-formed id.
    """
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw))
    except (TypeError, ValueError) as exc:
        raise InvalidUserIdError(f"User id is invalid: {raw!r}", at=at) from exc
