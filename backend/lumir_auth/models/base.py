"""Column mixins for the user directory tables (typed SQLAlchemy 2.0)."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column


class UUIDPKMixin:
    """Opaque ``id`` primary key.

    The value is generated client-side (UUID4) so it exists as soon as the
    row is flushed and never reveals insertion order.
    """

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)


class TimestampMixin:
    """Server-maintained ``created_at``/``updated_at`` columns (timezone-aware)."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class ReprMixin:
    def __repr__(self) -> str:
        # Only the id: rows may hold credentials
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"
