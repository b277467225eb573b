"""Password strength policy shared by the boundary schemas and the services."""

from __future__ import annotations

import re

MIN_PASSWORD_LENGTH = 12
#: bcrypt only consumes this many bytes of input; longer passwords are refused
MAX_PASSWORD_BYTES = 72

_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter."),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter."),
    (re.compile(r"\d"), "Password must contain at least one digit."),
)


def exceeds_byte_limit(password: str) -> bool:
    """``True`` when the UTF-8 encoding of ``password`` is over 72 bytes."""
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def check_password_strength(password: str) -> list[str]:
    """
    Return the policy violations of ``password`` (empty when it is acceptable).

    Rules: at least 12 characters, at most 72 bytes once UTF-8 encoded, one
    uppercase letter, one lowercase letter and one digit.

    :param password: Candidate plaintext password.
    :type password: str
    :returns: Human-readable violations, in rule order.
    :rtype: list[str]
    """
    violations: list[str] = []
    if len(password) < MIN_PASSWORD_LENGTH:
        violations.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
    if exceeds_byte_limit(password):
        violations.append(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long.")
    violations.extend(message for pattern, message in _RULES if not pattern.search(password))
    return violations
