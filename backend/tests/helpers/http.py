"""HTTP helper utilities for tests."""

from __future__ import annotations

from tests.factories.user import DEFAULT_PASSWORD

REFRESH_HEADER = "refreshtoken"


def session_headers(access_token: str | None, refresh_token: str | None) -> dict[str, str]:
    """Return the header pair protected routes require.

    Parameters
    ----------
    access_token:
        Sent as ``Authorization: Bearer <token>`` when given.
    refresh_token:
        Sent in the refresh token header when given.
    """

    headers: dict[str, str] = {}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if refresh_token:
        headers[REFRESH_HEADER] = refresh_token
    return headers


def signup_payload(**overrides: str) -> dict[str, str]:
    """Valid sign-up body; keys may be overridden per test."""

    payload = {
        "name": "John Doe",
        "email": "john@doe.com",
        "password": DEFAULT_PASSWORD,
        "passwordConfirmation": DEFAULT_PASSWORD,
    }
    payload.update(overrides)
    return payload


def sign_in(client, email: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
    """Sign in through the API and return the resulting session headers."""

    resp = client.post("/auth/v1/signin", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    body = resp.get_json()
    return session_headers(body["accessToken"], body["refreshToken"])
