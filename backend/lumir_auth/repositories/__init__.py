"""Repositories of the user directory."""

from __future__ import annotations

from lumir_auth.repositories.base import BaseRepository, Page
from lumir_auth.repositories.user import UserRepository

__all__ = ["BaseRepository", "Page", "UserRepository"]
