"""User repository for persistence and credential lookups."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from threadboard.models.base import RecordState
from threadboard.models.user import User
from threadboard.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It never issues tokens; it only stores whichever refresh token the auth
    service hands it.
    """

    model = User

    def _updatable_fields(self):
        """Profile fields editable by their owner (never credentials)."""
        return {"name", "nickname"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive), deleted or not.

        :param email: Email address to normalise and search.
        :returns: User instance or ``None`` when not found.
        """
        stmt = select(User).where(User.email == email.lower().strip())
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def get_active(self, user_id: int) -> User | None:
        """Return the user only when it exists and is not soft-deleted."""
        stmt = self._live(select(User).where(User.id == user_id))
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def nickname_taken(self, nickname: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` when another row already holds ``nickname``.

        Soft-deleted rows still count: the unique constraint spans them.
        """
        stmt = select(User.id).where(User.nickname == nickname.strip())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Session state ----------------------------

    def set_refresh_token(self, user: User, token: str | None) -> None:
        """Overwrite the stored refresh token (``None`` logs the user out)."""
        user.refresh_token = token
        self.flush()

    def soft_delete(self, user: User) -> None:
        """Mark the account deleted and drop its session."""
        user.state = RecordState.DELETED
        user.refresh_token = None
        self.flush()
