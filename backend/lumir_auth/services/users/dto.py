# lumir_auth/services/users/dto.py
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Partial profile update. ``None`` means "leave unchanged".

    :param name: New display name.
    :type name: str | None
    :param email: New login email (must be unused).
    :type email: str | None
    :param company: New organization label.
    :type company: str | None
    :param password: New plaintext password (policy-checked, re-hashed).
    :type password: str | None
    """

    name: str | None = None
    email: str | None = None
    company: str | None = None
    password: str | None = None

    def provided(self) -> dict[str, Any]:
        """Return only the fields the caller supplied."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True, slots=True)
class PageIn:
    """
    Listing request.

    :param page: 1-based page number.
    :type page: int
    :param size: Page size.
    :type size: int
    """

    page: int = 1
    size: int = 10
