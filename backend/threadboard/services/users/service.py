"""
UserService
===========

Profile management for the signed-in user and public profile lookups:
- Read and edit one's own name/nickname
- Delete (soft) one's own account
- Keyset listings of one's own posts and comments
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from threadboard.repositories.user import UserRepository
from threadboard.services._shared.base import AuthenticatedIdentity, BaseService
from threadboard.services._shared.dto import MessageOut
from threadboard.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
)
from threadboard.services.users.dto import (
    MeOut,
    MyCommentOut,
    MyPostOut,
    ProfileUpdateIn,
    UserPublicOut,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


def _unknown_caller() -> AuthenticationError:
    return AuthenticationError("User does not exist")


class UserService(BaseService):
    """Application service for the caller's own :class:`User` row."""

    def __init__(self, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        super().__init__()
        self.page_size = page_size

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def get_me(self, identity: AuthenticatedIdentity) -> MeOut:
        """
        :raises AuthenticationError: If the caller's account is gone.
        """
        with self.ro_uow() as uow:
            user = self.active_user(uow.users, identity.id, _unknown_caller())
            return MeOut(email=user.email, name=user.name, nickname=user.nickname)

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        :raises NotFoundError: If the user is absent or soft-deleted.
        """
        with self.ro_uow() as uow:
            user = self.active_user(uow.users, user_id, NotFoundError("User", user_id))
            return UserPublicOut(id=user.id, name=user.name, nickname=user.nickname)

    def list_my_posts(
        self, identity: AuthenticatedIdentity, *, cursor: int | None = None
    ) -> list[MyPostOut]:
        """
        Page of the caller's live posts, newest first.

        A cursor that is not one of the caller's live posts restarts from the
        newest post.
        """
        with self.ro_uow() as uow:
            self.active_user(uow.users, identity.id, _unknown_caller())
            if cursor is not None and not uow.posts.is_live_owned(cursor, identity.id):
                cursor = None
            posts = uow.posts.list_by_author(identity.id, cursor=cursor, limit=self.page_size)
            return [MyPostOut(id=p.id, title=p.title) for p in posts]

    def list_my_comments(
        self, identity: AuthenticatedIdentity, *, cursor: int | None = None
    ) -> list[MyCommentOut]:
        """Page of the caller's live comments, newest first (same cursor rule)."""
        with self.ro_uow() as uow:
            self.active_user(uow.users, identity.id, _unknown_caller())
            if cursor is not None and not uow.comments.is_live_owned(cursor, identity.id):
                cursor = None
            comments = uow.comments.list_by_author(
                identity.id, cursor=cursor, limit=self.page_size
            )
            return [MyCommentOut(id=c.id, content=c.content, post_id=c.post_id) for c in comments]

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def update_me(self, identity: AuthenticatedIdentity, dto: ProfileUpdateIn) -> MessageOut:
        """
        Edit name and nickname.

        :returns: ``No changes`` when both values already match.
        :raises ConflictError: If another account holds the nickname.
        """
        with self.atomic("Profile update failed") as uow:
            repo: UserRepository = uow.users
            user = self.active_user(repo, identity.id, _unknown_caller())

            if user.name == dto.name and user.nickname == dto.nickname:
                return MessageOut(message="No changes")

            if repo.nickname_taken(dto.nickname, exclude_id=user.id):
                raise ConflictError("User", "nickname already in use")

            try:
                repo.assign_updates(user, {"name": dto.name, "nickname": dto.nickname})
            except IntegrityError as exc:
                raise ConflictError("User", "nickname already in use") from exc
            logger.info("user.updated", extra={"user_id": user.id})

        return MessageOut(message="Profile updated")

    def delete_me(self, identity: AuthenticatedIdentity) -> MessageOut:
        """
        Soft-delete the caller's account and end its session.

        Posts and comments stay in place but disappear from every read that
        checks the author. Signing up again with the same email revives it.
        """
        with self.atomic("Account deletion failed") as uow:
            repo: UserRepository = uow.users
            user = self.active_user(repo, identity.id, _unknown_caller())
            repo.soft_delete(user)
            logger.info("user.deleted", extra={"user_id": user.id})
        return MessageOut(message="Account deleted")
