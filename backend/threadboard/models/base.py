"""Reusable SQLAlchemy mixins shared by domain models (typed 2.0)."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


class RecordState(str, enum.Enum):
    """Lifecycle tag of soft-deletable rows."""

    ACTIVE = "active"
    DELETED = "deleted"


class CreatedAtMixin:
    """Provide a ``created_at`` column filled by the database on insert."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class TimestampMixin(CreatedAtMixin):
    """Provide ``created_at`` and ``updated_at`` timestamp columns.

    Attributes
    ----------
    created_at:
        Timezone-aware timestamp filled by the database on insert.
    updated_at:
        Timezone-aware timestamp refreshed by the database on update.
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class SoftDeleteMixin:
    """Tag a row as ``ACTIVE`` or ``DELETED`` instead of removing it.

    Soft-deleted rows stay in place for referential integrity but are excluded
    from every normal read. Callers branch on :attr:`is_active` rather than
    comparing raw column values.
    """

    state: Mapped[RecordState] = mapped_column(
        Enum(
            RecordState,
            native_enum=False,
            length=16,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=RecordState.ACTIVE,
        server_default=RecordState.ACTIVE.value,
    )

    @property
    def is_active(self) -> bool:
        return self.state is not RecordState.DELETED

    @property
    def is_deleted(self) -> bool:
        return self.state is RecordState.DELETED

    def soft_delete(self) -> None:
        """Move the row to ``DELETED``."""
        self.state = RecordState.DELETED

    def restore(self) -> None:
        """Move the row back to ``ACTIVE``."""
        self.state = RecordState.ACTIVE


class PKMixin:
    """Expose an integer surrogate primary key column named ``id``."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class ReprMixin:
    """Provide a concise ``__repr__`` including the class name and id."""

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        key = getattr(self, "id", None)
        return f"<{cls} id={key}>"
