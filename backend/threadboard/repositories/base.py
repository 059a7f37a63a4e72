"""Repository base class shared by every aggregate.

Repositories are persistence-only:

- They never commit or roll back; services own the unit of work.
- They never decide use-case rules (ownership, visibility policy, limits).
- Updates go through a per-repository whitelist, so request payloads can
  never mass-assign columns such as ``password_hash`` or ``refresh_token``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from threadboard.core.extensions import db
from threadboard.models.base import RecordState, SoftDeleteMixin

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Persistence helpers for one mapped model with an integer ``id``.

    Subclasses set ``model`` and may override ``_updatable_fields``. Models
    carrying :class:`~threadboard.models.base.SoftDeleteMixin` are
    soft-deleted by :meth:`delete`; everything else is hard-deleted.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Hooks ------------------------------------

    def _updatable_fields(self) -> set[str]:
        """Keys :meth:`assign_updates` may set; empty means none."""
        return set()

    def _live(self, stmt: Select[Any]) -> Select[Any]:
        """Restrict ``stmt`` to ``ACTIVE`` rows of a soft-deletable model."""
        return stmt.where(getattr(self.model, "state") == RecordState.ACTIVE)

    def _by_id(self, entity_id: int) -> Select[Any]:
        return select(self.model).where(getattr(self.model, "id") == entity_id)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush so its primary key is assigned."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: int) -> E | None:
        """Return the row with ``entity_id`` whatever its lifecycle state."""
        result = self.session.execute(self._by_id(entity_id)).scalars().first()
        return cast(E | None, result)

    def get_for_update(self, entity_id: int) -> E | None:
        """Like :meth:`get`, locking the row (``FOR UPDATE``) where supported."""
        stmt = self._by_id(entity_id).with_for_update()
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def delete(self, instance: E) -> None:
        """Soft-delete when the model supports it, else delete; then flush."""
        if isinstance(instance, SoftDeleteMixin):
            instance.soft_delete()
        else:
            self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    # ----------------------------- Safe updates -------------------------------

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        flush: bool = True,
    ) -> E:
        """Set whitelisted attributes on ``instance``.

        Assignment goes through ``setattr`` so model ``@validates`` hooks run.

        :raises ValueError: If any key is not in :meth:`_updatable_fields`.
        """
        allowed = self._updatable_fields()
        rejected = sorted(k for k in fields if k not in allowed)
        if rejected:
            raise ValueError(f"Non-updatable fields: {rejected}")
        for key, value in fields.items():
            setattr(instance, key, value)
        if flush:
            self.flush()
        return instance
