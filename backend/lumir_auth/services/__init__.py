"""Service layer public API.

Services orchestrate use cases over repositories and ports and raise only
framework-free errors from :mod:`lumir_auth.services._shared.errors`.

Packages
--------
- ``auth``: sign-up, sign-in, sign-out, slide-session, account deletion.
- ``users``: profile retrieval and update, admin listing.
- ``mail``: templated, fire-and-forget notifications.
"""
